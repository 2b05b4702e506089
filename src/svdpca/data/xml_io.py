"""
Plain-text XML persistence for arraysets.

Layout::

    <dataset>
      <arrayset id="1" elementtype="float64" shape="3">
        <array id="1"> 1 0 0</array>
        ...
      </arrayset>
    </dataset>

Values are whitespace separated, flattened in C order, and written with
``precision`` significant digits. Relations are not handled.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, Mapping, Sequence

import numpy as np

from ..core.io import ensure_dir
from ..errors import DatasetFormatError
from .arrayset import Arrayset

log = logging.getLogger(__name__)


def _fmt(values: np.ndarray, precision: int, scientific: bool) -> str:
    if values.dtype.kind in "iub":
        return "".join(f" {int(v)}" for v in values)
    spec = f".{precision}e" if scientific else f".{precision}g"
    return "".join(f" {format(float(v), spec)}" for v in values)


def _arrayset_node(set_id: int, arrayset: Arrayset, precision: int, scientific: bool) -> ET.Element:
    node = ET.Element("arrayset")
    node.set("id", str(set_id))
    node.set("elementtype", str(arrayset.element_type))
    node.set("shape", " ".join(str(s) for s in (arrayset.shape or ())))
    for i, sample in enumerate(arrayset, start=1):
        a = ET.SubElement(node, "array")
        a.set("id", str(i))
        a.text = _fmt(np.ravel(sample), precision, scientific)
    return node


def write_dataset(
    path: Path | str,
    arraysets: Sequence[Arrayset] | Mapping[int, Arrayset],
    precision: int = 10,
    scientific: bool = False,
) -> Path:
    """Write arraysets to ``path``. A sequence is numbered from 1."""
    items = arraysets.items() if isinstance(arraysets, Mapping) else enumerate(arraysets, start=1)
    root = ET.Element("dataset")
    for set_id, aset in items:
        if aset.element_type is None:
            raise DatasetFormatError(f"arrayset {set_id} is empty and has no element type")
        if aset.element_type.kind not in "iubf":
            raise DatasetFormatError(f"arrayset {set_id}: element type {aset.element_type} cannot be written as text")
        root.append(_arrayset_node(int(set_id), aset, precision, scientific))
    tree = ET.ElementTree(root)
    ET.indent(tree)
    p = Path(path)
    ensure_dir(p.parent)
    tree.write(p, encoding="UTF-8", xml_declaration=True)
    log.debug(f"wrote {len(root)} arrayset(s) to {p}")
    return p


def _parse_shape(text: str | None) -> tuple:
    try:
        return tuple(int(t) for t in (text or "").split())
    except ValueError as e:
        raise DatasetFormatError(f"bad shape attribute: {text!r}") from e


def read_dataset(path: Path | str) -> Dict[int, Arrayset]:
    """Read every arrayset in ``path``, keyed by its id."""
    try:
        root = ET.parse(Path(path)).getroot()
    except ET.ParseError as e:
        raise DatasetFormatError(f"{path}: {e}") from e
    if root.tag != "dataset":
        raise DatasetFormatError(f"{path}: root element is <{root.tag}>, expected <dataset>")

    out: Dict[int, Arrayset] = {}
    for node in root.findall("arrayset"):
        try:
            set_id = int(node.get("id", ""))
            dtype = np.dtype(node.get("elementtype", ""))
        except (TypeError, ValueError) as e:
            raise DatasetFormatError(f"{path}: bad arrayset attributes {node.attrib}") from e
        shape = _parse_shape(node.get("shape"))
        aset = Arrayset(element_type=dtype, shape=shape)
        for arr in node.findall("array"):
            try:
                tokens = (arr.text or "").split()
                if dtype.kind in "iu":
                    # exact for integers beyond float64 precision
                    values = np.array(tokens, dtype=dtype).reshape(shape)
                else:
                    values = np.array(tokens, dtype=np.float64).astype(dtype).reshape(shape)
            except ValueError as e:
                raise DatasetFormatError(
                    f"{path}: array {arr.get('id')} of arrayset {set_id} does not fit shape {shape}"
                ) from e
            aset.append(values)
        out[set_id] = aset
    return out
