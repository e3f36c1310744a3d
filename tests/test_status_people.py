from tracker_app.core.models import PersonModel
from tracker_app.core.people import build_name_lookup, display_name
from tracker_app.core.status import normalize_priority, normalize_status, ordered_labels


def test_normalize_status_variants():
    assert normalize_status("  fixed ") == "FIXED"
    assert normalize_status("Open") == "OPEN"
    assert normalize_status(None) == ""
    assert normalize_status("   ") == ""
    assert normalize_status("nan") == ""
    assert normalize_priority(" Urgent") == "URGENT"


def test_ordered_labels_preferred_first():
    assert ordered_labels({"PASS", "ZED", "", "OPEN"}, ["OPEN", "WIP"]) == ["OPEN", "WIP", "PASS", "ZED"]


def test_name_lookup_first_row_wins():
    names = build_name_lookup([PersonModel(1, " Alice "), PersonModel(1, "Other"), PersonModel(2, None)])
    assert names == {1: "Alice", 2: ""}


def test_display_name_is_total():
    names = {1: "Alice", 2: "", 3: "   "}
    assert display_name(1, names) == "Alice"
    assert display_name(2, names) == "EMP#2"
    assert display_name(3, names) == "EMP#3"
    assert display_name(4, names) == "EMP#4"
    assert display_name(None, names) == "Unknown"
