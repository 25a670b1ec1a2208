from __future__ import annotations

from bs4 import BeautifulSoup
import pytest

from fitmedia import dimensions as dimensions_module
from fitmedia.config import normalize_options
from fitmedia.mutators import fit_fragment, resize_fragment


def _tag(html: str, name: str):
    node = BeautifulSoup(html, "html.parser").find(name)
    assert node is not None
    return node


def test_resize_stamps_hints_and_dimensions(img_dir: str) -> None:
    options = normalize_options(imgDir=img_dir, imgDecoding="async")

    html = resize_fragment('<img src="photo.png" alt="A photo">', options)

    assert html is not None
    img = _tag(html, "img")
    assert img["loading"] == "lazy"
    assert img["decoding"] == "async"
    assert img["style"] == "aspect-ratio:16/9;"
    assert img["width"] == "16"
    assert img["height"] == "9"
    assert img["alt"] == "A photo"


def test_resize_merges_existing_style(img_dir: str) -> None:
    options = normalize_options(imgDir=img_dir)

    html = resize_fragment('<img src="photo.png" style="border:1px solid red">', options)

    assert _tag(html, "img")["style"] == "border:1px solid red; aspect-ratio:16/9;"


def test_resize_respects_disabled_features(img_dir: str) -> None:
    options = normalize_options(
        imgDir=img_dir, imgLazyLoad=False, aspectRatio=False, imgSizeHint=False
    )

    assert resize_fragment('<img src="photo.png">', options) is None


def test_resize_overwrites_size_when_probing(img_dir: str) -> None:
    options = normalize_options(imgDir=img_dir, imgSizeFromAttributes=False)

    img = _tag(resize_fragment('<img src="photo.png" width="100" height="100">', options), "img")

    assert (img["width"], img["height"]) == ("16", "9")
    assert img["style"] == "aspect-ratio:16/9;"


def test_resize_trusts_declared_size(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[object] = []

    def _probe(source: object) -> None:
        calls.append(source)
        raise AssertionError("probe should not run")

    monkeypatch.setattr(dimensions_module, "probe", _probe)

    img = _tag(
        resize_fragment('<img src="photo.png" width="640" height="480">', normalize_options()),
        "img",
    )

    assert img["style"] == "aspect-ratio:640/480;"
    assert calls == []


def test_resize_missing_file_only_adds_loading_hints() -> None:
    options = normalize_options(imgDecoding="sync")

    img = _tag(resize_fragment('<img src="missing.png">', options), "img")

    assert img["loading"] == "lazy"
    assert img["decoding"] == "sync"
    for attribute in ("width", "height", "style"):
        assert attribute not in img.attrs


def test_resize_without_src_still_adds_hints() -> None:
    img = _tag(resize_fragment("<img alt=\"empty\">", normalize_options()), "img")

    assert img["loading"] == "lazy"
    assert "style" not in img.attrs


@pytest.mark.parametrize("trust", [True, False])
def test_resize_is_idempotent(img_dir: str, trust: bool) -> None:
    options = normalize_options(imgDir=img_dir, imgSizeFromAttributes=trust)

    first = resize_fragment('<img src="photo.png" style="color:red">', options)
    second = resize_fragment(first, options)

    assert second is None
    assert first.count("aspect-ratio") == 1
    assert _tag(first, "img")["style"] == "color:red; aspect-ratio:16/9;"


def test_resize_ignores_fragments_without_images() -> None:
    assert resize_fragment("<span>just text</span>", normalize_options()) is None


def test_resize_uses_configured_selector(img_dir: str) -> None:
    options = normalize_options(imgDir=img_dir, resizeElements=["img.hero"])

    html = resize_fragment('<p><img src="photo.png"><img class="hero" src="photo.png"></p>', options)

    plain, hero = BeautifulSoup(html, "html.parser").find_all("img")
    assert "loading" not in plain.attrs
    assert hero["loading"] == "lazy"


def test_wrap_moves_iframe_into_ratio_box() -> None:
    html = fit_fragment(
        '<iframe width="640" height="360" src="https://example.com/embed"></iframe>',
        normalize_options(),
    )

    soup = BeautifulSoup(html, "html.parser")
    iframe = soup.find("iframe")
    wrappers = soup.find_all("div")
    assert len(wrappers) == 1
    wrapper = wrappers[0]
    assert iframe.parent is wrapper
    assert list(wrapper.children) == [iframe]
    assert "width" not in iframe.attrs
    assert "height" not in iframe.attrs
    assert iframe["style"] == "position:absolute; top:0; left:0; width:100%; height:100%;"
    assert wrapper["class"] == ["fit-media-box"]
    assert wrapper["style"] == (
        "position:relative; height:0; padding-bottom:56.25%; aspect-ratio:640/360;"
    )


def test_wrap_without_aspect_ratio() -> None:
    html = fit_fragment('<video width="300" height="100"></video>', normalize_options(aspectRatio=False))

    wrapper = _tag(html, "div")
    assert wrapper["style"] == "position:relative; height:0; padding-bottom:33.3333%;"


def test_wrap_merges_element_style() -> None:
    html = fit_fragment(
        '<iframe width="4" height="3" style="border:0"></iframe>', normalize_options()
    )

    assert _tag(html, "iframe")["style"] == (
        "border:0; position:absolute; top:0; left:0; width:100%; height:100%;"
    )


@pytest.mark.parametrize(
    "markup",
    [
        '<iframe width="640" src="https://example.com/embed"></iframe>',
        '<iframe width="640" height="0"></iframe>',
        '<video height="360" width="wide"></video>',
        "<p>No media here</p>",
    ],
)
def test_wrap_skips_ineligible_fragments(markup: str) -> None:
    assert fit_fragment(markup, normalize_options()) is None


def test_wrap_handles_each_matching_element() -> None:
    html = fit_fragment(
        '<div><iframe width="16" height="9"></iframe><video width="4" height="3"></video>'
        '<iframe width="1"></iframe></div>',
        normalize_options(),
    )

    soup = BeautifulSoup(html, "html.parser")
    assert len(soup.select("div.fit-media-box")) == 2
    assert len(soup.select("div.fit-media-box > iframe")) == 1
    assert len(soup.select("div.fit-media-box > video")) == 1


def test_wrap_is_not_applied_twice() -> None:
    options = normalize_options()
    first = fit_fragment('<iframe width="640" height="360"></iframe>', options)

    assert fit_fragment(first, options) is None


def test_fluid_strategy_keeps_element_in_place() -> None:
    options = normalize_options(fitStrategy="fluid")

    html = fit_fragment('<iframe width="640" height="360"></iframe>', options)

    soup = BeautifulSoup(html, "html.parser")
    iframe = soup.find("iframe")
    assert soup.find("div") is None
    assert iframe["width"] == "640"
    assert iframe["style"] == "aspect-ratio:640/360; width:100%; max-width:100%; height:auto;"
    assert fit_fragment(html, options) is None


def test_custom_wrapper_class() -> None:
    html = fit_fragment(
        '<iframe width="2" height="1"></iframe>', normalize_options(wrapperClass="embed")
    )

    assert _tag(html, "div")["class"] == ["embed"]


def test_non_ascii_digit_sizes_do_not_block_sibling_hints() -> None:
    html = resize_fragment(
        '<p><img src="a.png"><img src="b.png" width="²" height="5"></p>',
        normalize_options(),
    )

    first, second = BeautifulSoup(html, "html.parser").find_all("img")
    assert first["loading"] == "lazy"
    assert second["loading"] == "lazy"
    assert "style" not in second.attrs


def test_wrap_rejects_non_ascii_digit_sizes() -> None:
    assert fit_fragment('<iframe width="٣" height="5"></iframe>', normalize_options()) is None
