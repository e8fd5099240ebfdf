import base64

import pytest

from algorand_mcp.response import PaginationMetadata, decode_page_token, encode_page_token, paginate


def _b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


@pytest.mark.parametrize("page", [1, 2, 17, 1_000_000])
def test_token_round_trip(page):
    assert decode_page_token(encode_page_token(page)) == page


def test_token_is_base64_of_page_prefix():
    assert encode_page_token(2) == _b64("page_2")


@pytest.mark.parametrize(
    "token",
    [
        None,
        "",
        "not a token!!",
        "abc",
        _b64("page_"),
        _b64("page_two"),
        _b64("hello"),
        base64.b64encode(b"\xff\xfe\xfd").decode("ascii"),
        "été",
        12345,
    ],
)
def test_unreadable_tokens_fall_back_to_first_page(token):
    assert decode_page_token(token) == 1


@pytest.mark.parametrize("raw", ["page_0", "page_-3"])
def test_non_positive_pages_are_clamped(raw):
    assert decode_page_token(_b64(raw)) == 1


def test_paginate_sequence_first_page():
    page, metadata = paginate(list(range(21)), items_per_page=10)
    assert page == list(range(10))
    assert metadata == PaginationMetadata(
        total_items=21,
        items_per_page=10,
        current_page=1,
        total_pages=3,
        has_next_page=True,
        page_token=encode_page_token(2),
    )


def test_paginate_sequence_last_page_has_no_token():
    page, metadata = paginate(list(range(21)), encode_page_token(3), items_per_page=10)
    assert page == [20]
    assert metadata.has_next_page is False
    assert metadata.page_token is None
    assert "pageToken" not in metadata.to_dict()


def test_exact_multiple_has_no_next_page():
    page, metadata = paginate(list(range(20)), encode_page_token(2), items_per_page=10)
    assert page == list(range(10, 20))
    assert metadata.total_pages == 2
    assert metadata.has_next_page is False


def test_paginate_mapping_keeps_insertion_order():
    mapping = {key: index for index, key in enumerate("zyxwvutsrqpo")}
    page, metadata = paginate(mapping, encode_page_token(2), items_per_page=5)
    assert list(page.items()) == [("u", 5), ("t", 6), ("s", 7), ("r", 8), ("q", 9)]
    assert isinstance(page, dict)
    assert metadata.total_items == 12
    assert metadata.current_page == 2
    assert metadata.has_next_page is True


def test_out_of_range_page_is_empty():
    page, metadata = paginate({"a": 1, "b": 2}, encode_page_token(4), items_per_page=1)
    assert page == {}
    assert metadata.current_page == 4
    assert metadata.total_pages == 2
    assert metadata.has_next_page is False


def test_metadata_dict_field_order():
    _, metadata = paginate(list(range(3)), items_per_page=1)
    assert list(metadata.to_dict()) == [
        "totalItems",
        "itemsPerPage",
        "currentPage",
        "totalPages",
        "hasNextPage",
        "pageToken",
    ]
