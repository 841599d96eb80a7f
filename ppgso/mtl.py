"""Parsing of Wavefront material (.mtl) libraries."""

from __future__ import annotations

import math
import os
import struct
from dataclasses import dataclass, field
from typing import Iterable, Optional

_DIGITS = "0123456789"
_FLOAT32_MAX = 3.4028234663852886e38
_FLOAT32 = struct.Struct("<f")

Vec3 = tuple[float, float, float]


@dataclass
class Material:
    """A named material with colours, scalar properties and texture names."""

    name: str = ""
    ambient: Vec3 = (0.0, 0.0, 0.0)
    diffuse: Vec3 = (0.0, 0.0, 0.0)
    specular: Vec3 = (0.0, 0.0, 0.0)
    transmittance: Vec3 = (0.0, 0.0, 0.0)
    emission: Vec3 = (0.0, 0.0, 0.0)
    shininess: float = 1.0
    ior: float = 1.0
    dissolve: float = 1.0
    illum: int = 0
    ambient_texname: str = ""
    diffuse_texname: str = ""
    specular_texname: str = ""
    specular_highlight_texname: str = ""
    bump_texname: str = ""
    displacement_texname: str = ""
    alpha_texname: str = ""
    unknown_parameter: dict[str, str] = field(default_factory=dict)


def _to_float32(value: float) -> float:
    """Round a double to the nearest single-precision value."""
    if math.isnan(value) or math.isinf(value):
        return value
    if abs(value) > _FLOAT32_MAX:
        try:
            return _FLOAT32.unpack(_FLOAT32.pack(value))[0]
        except OverflowError:
            return math.copysign(math.inf, value)
    return _FLOAT32.unpack(_FLOAT32.pack(value))[0]


def _scale_by_ten(mantissa: float, exponent: int) -> float:
    try:
        scaled = mantissa * 5.0**exponent
    except OverflowError:
        scaled = mantissa * math.inf
    try:
        return math.ldexp(scaled, exponent)
    except OverflowError:
        return math.copysign(math.inf, scaled)


def try_parse_double(text: str) -> Optional[float]:
    """Parse a decimal number greedily from the start of ``text``.

    Accepts an optional sign, integer digits, an optional fraction and an
    optional exponent. Parsing stops at the first character that does not fit.
    Returns None when no number can be read.
    """
    if not text:
        return None

    end = len(text)
    pos = 0
    sign = "+"
    mantissa = 0.0
    exponent = 0

    if text[pos] in "+-":
        sign = text[pos]
        pos += 1
    elif text[pos] not in _DIGITS:
        return None

    read = 0
    while pos < end and text[pos] in _DIGITS:
        mantissa = mantissa * 10 + (ord(text[pos]) - 0x30)
        pos += 1
        read += 1
    if read == 0:
        return None

    if pos < end:
        parse_exponent = True
        if text[pos] == ".":
            pos += 1
            read = 1
            while pos < end and text[pos] in _DIGITS:
                mantissa += (ord(text[pos]) - 0x30) * 10.0 ** (-read)
                read += 1
                pos += 1
            parse_exponent = pos < end and text[pos] in "eE"
        elif text[pos] not in "eE":
            parse_exponent = False

        if parse_exponent:
            pos += 1
            exp_sign = "+"
            if pos < end and text[pos] in "+-":
                exp_sign = text[pos]
                pos += 1
            elif pos >= end or text[pos] not in _DIGITS:
                return None
            read = 0
            while pos < end and text[pos] in _DIGITS:
                exponent = exponent * 10 + (ord(text[pos]) - 0x30)
                pos += 1
                read += 1
            if read == 0:
                return None
            if exp_sign == "-":
                exponent = -exponent

    value = _scale_by_ten(mantissa, exponent)
    return value if sign == "+" else -value


def _field_end(text: str) -> int:
    for index, char in enumerate(text):
        if char in " \t\r":
            return index
    return len(text)


def parse_float(text: str) -> tuple[float, str]:
    """Read one single-precision number field; return it and the text after it.

    A field that is not a number reads as 0.0.
    """
    text = text.lstrip(" \t")
    end = _field_end(text)
    value = try_parse_double(text[:end])
    return _to_float32(value if value is not None else 0.0), text[end:]


def _parse_float3(text: str) -> Vec3:
    x, text = parse_float(text)
    y, text = parse_float(text)
    z, _ = parse_float(text)
    return (x, y, z)


def _atoi(text: str) -> int:
    text = text.lstrip(" \t\n\v\f\r")
    pos = 0
    negative = False
    if text[:1] in ("+", "-"):
        negative = text[0] == "-"
        pos = 1
    digits = ""
    while pos < len(text) and text[pos] in _DIGITS:
        digits += text[pos]
        pos += 1
    value = int(digits) if digits else 0
    return -value if negative else value


def _parse_int(text: str) -> int:
    return _atoi(text.lstrip(" \t"))


def _first_word(text: str) -> str:
    words = text.split()
    return words[0] if words else ""


def _has_keyword(text: str, keyword: str) -> bool:
    size = len(keyword)
    return text.startswith(keyword) and len(text) > size and text[size] in " \t"


_COLOUR_KEYS = {
    "Ka": "ambient",
    "Kd": "diffuse",
    "Ks": "specular",
    "Kt": "transmittance",
}

_TEXTURE_KEYS = (
    ("map_Ka", "ambient_texname"),
    ("map_Kd", "diffuse_texname"),
    ("map_Ks", "specular_texname"),
    ("map_Ns", "specular_highlight_texname"),
    ("map_bump", "bump_texname"),
    ("map_d", "alpha_texname"),
    ("bump", "bump_texname"),
    ("disp", "displacement_texname"),
)


def _clean_lines(stream: Iterable[str]) -> Iterable[str]:
    for raw in stream:
        line = raw.split("\0", 1)[0]
        if line.endswith("\n"):
            line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
        yield line


def _apply_line(material: Material, directive: str) -> None:
    for key, attribute in _COLOUR_KEYS.items():
        if _has_keyword(directive, key):
            setattr(material, attribute, _parse_float3(directive[2:]))
            return
    if _has_keyword(directive, "Ni"):
        material.ior = parse_float(directive[2:])[0]
        return
    if _has_keyword(directive, "Ke"):
        material.emission = _parse_float3(directive[2:])
        return
    if _has_keyword(directive, "Ns"):
        material.shininess = parse_float(directive[2:])[0]
        return
    if _has_keyword(directive, "illum"):
        material.illum = _parse_int(directive[6:])
        return
    if _has_keyword(directive, "d"):
        material.dissolve = parse_float(directive[1:])[0]
        return
    if _has_keyword(directive, "Tr"):
        material.dissolve = _to_float32(1.0 - parse_float(directive[2:])[0])
        return
    for key, attribute in _TEXTURE_KEYS:
        if _has_keyword(directive, key):
            setattr(material, attribute, directive[len(key) + 1 :])
            return

    split = directive.find(" ")
    if split < 0:
        split = directive.find("\t")
    if split >= 0:
        material.unknown_parameter.setdefault(directive[:split], directive[split + 1 :])


def load_mtl(stream: Iterable[str]) -> tuple[list[Material], dict[str, int]]:
    """Parse a material library from an iterable of text lines.

    Returns the materials in file order and a map from material name to its
    index; when a name repeats, the map keeps the first index. The material
    being built when the input ends is always kept, so an empty input yields
    one default material with an empty name.
    """
    materials: list[Material] = []
    material_map: dict[str, int] = {}

    def flush(material: Material) -> None:
        material_map.setdefault(material.name, len(materials))
        materials.append(material)

    material = Material()
    for line in _clean_lines(stream):
        directive = line.lstrip(" \t")
        if not directive or directive.startswith("#"):
            continue

        if _has_keyword(directive, "newmtl"):
            if material.name:
                flush(material)
            material = Material(name=_first_word(directive[7:]))
            continue

        _apply_line(material, directive)

    flush(material)
    return materials, material_map


class MaterialFileReader:
    """Loads material libraries from files, relative to an optional base path."""

    def __init__(self, mtl_basepath: str = "") -> None:
        self.mtl_basepath = mtl_basepath

    def __repr__(self) -> str:
        return f"MaterialFileReader(mtl_basepath={self.mtl_basepath!r})"

    def __call__(self, mat_id: str) -> tuple[list[Material], dict[str, int]]:
        """Read the library ``mat_id``; a missing file yields one default material."""
        filepath = self.mtl_basepath + mat_id if self.mtl_basepath else mat_id
        try:
            with open(
                os.fspath(filepath), encoding="utf-8", errors="replace", newline="\n"
            ) as stream:
                return load_mtl(stream)
        except OSError:
            return load_mtl([])