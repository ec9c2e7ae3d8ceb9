# --------------------------------------------------------
# |segment name|marker value|has length|description       |
# --------------------------------------------------------
# |SOI         |0xFFD8      |No        | start of image   |
# |EOI         |0xFFD9      |No        | end of image     |
# |RST0-RST7   |0xFFD0-D7   |No        | restart interval |
# |TEM         |0xFF01      |No        | arithmetic temp  |
# |DQT         |0xFFDB      |Yes       | quantization     |
# |DHT         |0xFFC4      |Yes       | huffman table    |
# |SOF0        |0xFFC0      |Yes       | baseline DCT     |
# |SOS         |0xFFDA      |Yes       | start of scan    |
# |APP0-APP15  |0xFFE0-EF   |Yes       | application data |
# |COM         |0xFFFE      |Yes       | comment          |
# --------------------------------------------------------
# Segments without a length are only 2 bytes (0xFF + marker).
# Otherwise the marker is followed by a 2 byte big-endian length that
# counts itself, so the payload is length - 2 bytes.
from __future__ import annotations

MARKER_PREFIX = 0xFF

TEM = 0x01

SOF0 = 0xC0
SOF1 = 0xC1
SOF2 = 0xC2
SOF3 = 0xC3
DHT = 0xC4
SOF5 = 0xC5
SOF6 = 0xC6
SOF7 = 0xC7
JPG = 0xC8
SOF9 = 0xC9
SOF10 = 0xCA
SOF11 = 0xCB
DAC = 0xCC
SOF13 = 0xCD
SOF14 = 0xCE
SOF15 = 0xCF

RST0 = 0xD0
RST1 = 0xD1
RST2 = 0xD2
RST3 = 0xD3
RST4 = 0xD4
RST5 = 0xD5
RST6 = 0xD6
RST7 = 0xD7

SOI = 0xD8
EOI = 0xD9
SOS = 0xDA
DQT = 0xDB
DNL = 0xDC
DRI = 0xDD
DHP = 0xDE
EXP = 0xDF

APP0 = 0xE0
APP1 = 0xE1
APP2 = 0xE2
APP3 = 0xE3
APP4 = 0xE4
APP5 = 0xE5
APP6 = 0xE6
APP7 = 0xE7
APP8 = 0xE8
APP9 = 0xE9
APP10 = 0xEA
APP11 = 0xEB
APP12 = 0xEC
APP13 = 0xED
APP14 = 0xEE
APP15 = 0xEF

JPG0 = 0xF0
JPG13 = 0xFD

COM = 0xFE


def _build_names() -> dict:
    names = {
        TEM: "TEM",
        DHT: "DHT",
        JPG: "JPG",
        DAC: "DAC",
        SOI: "SOI",
        EOI: "EOI",
        SOS: "SOS",
        DQT: "DQT",
        DNL: "DNL",
        DRI: "DRI",
        DHP: "DHP",
        EXP: "EXP",
        COM: "COM",
    }
    for m in range(SOF0, SOF15 + 1):
        names.setdefault(m, f"SOF{m - SOF0}")
    for m in range(RST0, RST7 + 1):
        names[m] = f"RST{m - RST0}"
    for m in range(APP0, APP15 + 1):
        names[m] = f"APP{m - APP0}"
    for m in range(JPG0, JPG13 + 1):
        names[m] = f"JPG{m - JPG0}"
    return names


MARKER_NAMES = _build_names()

_SOF_PROCESS = {
    0: "Baseline DCT",
    1: "Extended Sequential DCT",
    2: "Progressive DCT",
    3: "Lossless",
    5: "Differential Sequential DCT",
    6: "Differential Progressive DCT",
    7: "Differential Lossless",
    9: "Extended Sequential DCT, Arithmetic",
    10: "Progressive DCT, Arithmetic",
    11: "Lossless, Arithmetic",
    13: "Differential Sequential DCT, Arithmetic",
    14: "Differential Progressive DCT, Arithmetic",
    15: "Differential Lossless, Arithmetic",
}


def marker_name(marker: int) -> str:
    """Short symbolic name of a marker byte, or 0xHH if it isn't known."""
    name = MARKER_NAMES.get(marker)
    if name is None:
        return f"0x{marker:02X}"
    return name


def marker_info(marker: int) -> str:

    marker_dict = {
        TEM: "Temporary for Arithmetic Coding (TEM)",
        DHT: "Define Huffman Table (DHT)",
        JPG: "JPEG Extension (JPG)",
        DAC: "Define Arithmetic Coding (DAC)",
        SOI: "Start of Image (SOI)",
        EOI: "End of Image (EOI)",
        SOS: "Start of Scan (SOS)",
        DQT: "Define Quantization Table (DQT)",
        DNL: "Define Number of Lines (DNL)",
        DRI: "Define Restart Interval (DRI)",
        DHP: "Define Hierarchical Progression (DHP)",
        EXP: "Expand Reference Component (EXP)",
        COM: "Comment (COM)",
    }

    if marker in marker_dict:
        return marker_dict[marker]
    name = marker_name(marker)
    if SOF0 <= marker <= SOF15 and (marker - SOF0) in _SOF_PROCESS:
        return f"Start of Frame ({name}) - {_SOF_PROCESS[marker - SOF0]}"
    if RST0 <= marker <= RST7:
        return f"Restart ({name})"
    if APP0 <= marker <= APP15:
        return f"Application Segment ({name})"
    if JPG0 <= marker <= JPG13:
        return f"JPEG Extension ({name})"
    return f"Unknown Marker ({name})"


def has_length(marker: int) -> bool:
    """Whether a 2-byte length (and payload) follows the marker."""
    return not (marker in (SOI, EOI, TEM) or RST0 <= marker <= RST7)


def is_app(marker: int) -> bool:
    return APP0 <= marker <= APP15
