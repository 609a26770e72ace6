from __future__ import annotations

from ct_browser.core.models import NeuronRecord, PaneSelection, PaneState
from ct_browser.core.url_codec import build_location, decode, encode, selection_from_state


def test_encode_uses_pane_suffixed_display_strings():
    query = encode({"a": PaneSelection("Brain", "T1", "combined")})
    assert query == "dataset-a=Brain&celltype-a=T1&hemisphere-a=combined"


def test_encode_both_panes_in_order_and_percent_encodes():
    query = encode(
        {
            "b": PaneSelection("Female Adult Fly Brain", "LC10a/b", None),
            "a": PaneSelection("Male CNS", None, None),
        }
    )
    assert query == (
        "dataset-a=Male%20CNS"
        "&dataset-b=Female%20Adult%20Fly%20Brain&celltype-b=LC10a%2Fb"
    )


def test_encode_without_selection_is_empty():
    assert encode({}) == ""
    assert encode({"a": PaneSelection(), "b": PaneSelection()}) == ""
    assert build_location("/", "") == "/"
    assert build_location("/compare", "dataset-a=X") == "/compare?dataset-a=X"


def test_decode_is_inverse_of_encode():
    selections = {
        "a": PaneSelection("Male CNS", "T4 a", "left"),
        "b": PaneSelection("Female Adult Fly Brain", "Mi1", None),
    }
    assert decode("?" + encode(selections)) == selections


def test_decode_missing_keys_are_absent():
    decoded = decode("dataset-b=Brain&unknown=1&celltype-a=")
    assert decoded["a"] == PaneSelection()
    assert decoded["b"] == PaneSelection(dataset="Brain")
    assert decode(None)["a"].is_empty()


def test_selection_from_state_reads_display_label():
    state = PaneState(
        pane_id="a",
        dataset_name="Brain",
        base_url="https://ex.org/brain",
        catalog_names=["T1"],
        catalog_index={"t1": NeuronRecord("t1", {"combined": "t1.html"})},
        current_record=NeuronRecord("t1", {"combined": "t1.html"}),
        current_hemisphere="combined",
    )
    assert selection_from_state(state) == PaneSelection("Brain", "T1", "combined")
    assert selection_from_state(PaneState(pane_id="b")) == PaneSelection()
