import pytest

from music_library.domain.catalog import paginate_verses, split_verses
from music_library.errors import PageOutOfRangeError


@pytest.mark.unit
def test_split_on_blank_lines():
    assert split_verses("a\n\nb\n\nc") == ["a", "b", "c"]


@pytest.mark.unit
def test_text_without_blank_line_is_one_verse():
    assert split_verses("a") == ["a"]
    assert split_verses("line one\nline two") == ["line one\nline two"]


@pytest.mark.unit
def test_split_trims_surrounding_whitespace():
    assert split_verses("\n\n  a\n\nb  \n\n") == ["a", "b"]


@pytest.mark.unit
def test_separator_is_exactly_one_blank_line():
    # Three newlines leave a leading newline on the next verse
    assert split_verses("a\n\n\nb") == ["a", "\nb"]


@pytest.mark.unit
@pytest.mark.parametrize("text", ["", "   ", "\n\n", None])
def test_empty_text_has_no_verses(text):
    assert split_verses(text) == []


@pytest.mark.unit
def test_pagination_boundaries_with_five_verses():
    verses = ["v1", "v2", "v3", "v4", "v5"]

    assert paginate_verses(verses, 1, 4) == (["v1", "v2", "v3", "v4"], 5)
    assert paginate_verses(verses, 2, 4) == (["v5"], 5)
    with pytest.raises(PageOutOfRangeError):
        paginate_verses(verses, 3, 4)


@pytest.mark.unit
def test_page_one_of_empty_text_is_out_of_range():
    with pytest.raises(PageOutOfRangeError) as exc_info:
        paginate_verses(split_verses(""), 1, 4)
    assert exc_info.value.context["total_verses"] == 0
    assert exc_info.value.http_status == 404


@pytest.mark.unit
def test_exact_multiple_of_page_size_has_no_extra_page():
    verses = ["a", "b", "c", "d"]
    assert paginate_verses(verses, 2, 2) == (["c", "d"], 4)
    with pytest.raises(PageOutOfRangeError):
        paginate_verses(verses, 3, 2)
