from pathlib import Path

import numpy as np
import pytest

from svdpca.data.arrayset import Arrayset
from svdpca.data.xml_io import read_dataset, write_dataset
from svdpca.errors import DatasetFormatError


def test_write_read_dataset(tmp_path: Path):
    X = np.random.default_rng(0).normal(size=(4, 3))
    ints = Arrayset.from_array(np.arange(6, dtype=np.int32).reshape(3, 2))
    p = write_dataset(tmp_path / "db.xml", [Arrayset.from_array(X), ints])

    sets = read_dataset(p)
    assert sorted(sets) == [1, 2]
    assert sets[1].element_type == np.float64 and sets[1].shape == (3,)
    assert np.allclose(sets[1].to_array(), X, rtol=1e-9)
    assert sets[2].element_type == np.int32
    assert np.array_equal(sets[2].to_array(), ints.to_array())


def test_precision_and_scientific(tmp_path: Path):
    s = Arrayset.from_array(np.array([[1.0 / 3.0]]))
    p = write_dataset(tmp_path / "a.xml", {7: s}, precision=3, scientific=True)
    text = p.read_text()
    assert 'id="7"' in text
    assert "3.333e-01" in text
    assert np.allclose(read_dataset(p)[7][0], [0.3333])


def test_rank_two_arrays(tmp_path: Path):
    X = np.arange(8, dtype=np.float64).reshape(2, 2, 2)
    p = write_dataset(tmp_path / "m.xml", [Arrayset.from_array(X)])
    back = read_dataset(p)[1]
    assert back.shape == (2, 2)
    assert np.array_equal(back.to_array(), X)


def test_bad_documents(tmp_path: Path):
    p = tmp_path / "bad.xml"
    p.write_text("<dataset><arrayset")
    with pytest.raises(DatasetFormatError):
        read_dataset(p)

    p.write_text('<dataset><arrayset id="1" elementtype="float64" shape="3"><array id="1"> 1 2</array></arrayset></dataset>')
    with pytest.raises(DatasetFormatError, match="does not fit shape"):
        read_dataset(p)

    p.write_text("<relationset/>")
    with pytest.raises(DatasetFormatError):
        read_dataset(p)


def test_large_integers_exact(tmp_path: Path):
    X = np.array([[2**53 + 1, 3]], dtype=np.int64)
    p = write_dataset(tmp_path / "big.xml", [Arrayset.from_array(X)])
    back = read_dataset(p)[1]
    assert back.element_type == np.int64
    assert np.array_equal(back.to_array(), X)


def test_complex_rejected(tmp_path: Path):
    s = Arrayset.from_array(np.array([[1 + 2j, 3 + 0j]]))
    with pytest.raises(DatasetFormatError, match="complex128"):
        write_dataset(tmp_path / "c.xml", [s])
    assert not (tmp_path / "c.xml").exists()
