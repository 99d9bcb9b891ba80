"""
Shared fixtures: builders for corpus blocks in the Fine Foods line format.
"""

import pytest

FILLER_LINES = [
    "review/profileName: delmartian",
    "review/score: 5.0",
    "review/time: 1303862400",
    "review/summary: Good Quality Dog Food",
]


def _block(product_id="P1", user_id="U1", helpfulness="3/10",
           text="Great product!", filler=None):
    filler = FILLER_LINES if filler is None else filler
    return [
        f"product/productId: {product_id}",
        f"review/userId: {user_id}",
        f"review/helpfulness: {helpfulness}",
        f"review/text: {text}",
    ] + list(filler)


@pytest.fixture
def make_block():
    """Factory for an 8-line review block."""
    return _block


@pytest.fixture
def sample_lines():
    """Three complete blocks with nonzero denominators."""
    return (
        _block("B001E4KFG0", "A3SGXH7AUHU8GW", "1/1",
               "I have bought several of the Vitality canned dog food products.")
        + _block("B00813GRG4", "A1D87F6ZCVE5NK", "0/4",
                 "Product arrived labeled as Jumbo Salted Peanuts...")
        + _block("B001E4KFG0", "ABXLMWJIXXAIN", "3/10",
                 "This is a confection that has been around a few centuries.")
    )


@pytest.fixture
def corpus_file(tmp_path, sample_lines):
    """Sample corpus on disk, blocks separated by blank lines as published."""
    path = tmp_path / "finefoods.txt"
    chunks = []
    for start in range(0, len(sample_lines), 8):
        chunks.append("\n".join(sample_lines[start:start + 8]))
    path.write_text("\n\n".join(chunks) + "\n", encoding="utf-8")
    return path
