"""Tests for species file listing order."""

from birbs.analytics.files import order_files_for_display


def test_most_recent_first(make_detection):
    files = [
        make_detection("2023-04-11T08:00:00Z", file_name="b.mp3"),
        make_detection("2023-04-12T08:00:00Z", file_name="c.mp3"),
        make_detection("2023-04-10T08:00:00Z", file_name="a.mp3"),
    ]
    assert [f.file_name for f in order_files_for_display(files)] == ["c.mp3", "b.mp3", "a.mp3"]


def test_limit(make_detection):
    files = [make_detection(f"2023-04-{day:02d}", file_name=f"{day}.mp3") for day in range(1, 6)]
    assert [f.file_name for f in order_files_for_display(files, limit=2)] == ["5.mp3", "4.mp3"]


def test_empty():
    assert order_files_for_display([]) == []
