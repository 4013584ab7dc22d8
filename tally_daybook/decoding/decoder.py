# ==============================================
# Decoder
# ==============================================
#
# PURPOSE:
#   Turn the raw bytes of a Tally export (whatever encoding Tally
#   happened to write) into one canonical Python string.
#
# WHY THIS CLASS EXISTS:
#   Tally writes daybook exports as UTF-16 LE with a BOM by default,
#   but files that went through other tools arrive as UTF-16 BE,
#   UTF-8 with a BOM, plain UTF-8, or with a stray junk character in
#   front of the first "<". The regex extractor downstream needs clean
#   text with no BOM and no control characters.
#
# CLASS: Decoder
# --------------
#   Stateless. All methods are classmethods.
#
#   - detect_bom(raw: bytes) -> BomKind
#   - decode(raw: bytes, repair: bool = False) -> str
#       Total function: never raises. Checked in this order:
#         1. FF FE    -> UTF-16 LE
#         2. FE FF    -> UTF-16 BE (byte-swapped to LE, then decoded)
#         3. EF BB BF -> UTF-8
#         4. nothing  -> UTF-8, malformed sequences replaced
#       Then control characters are stripped (tab, LF, CR kept).
#   - clean_file(path: str, backup: bool = True) -> CleanResult
#       Rewrite a file in place as UTF-8 without BOM. A file with no
#       BOM is only touched to drop a stray leading character; its
#       remaining bytes are kept as they are.
#
# ==============================================

import re
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Tuple, Union

from tally_daybook.errors import DaybookReadError


class BomKind(Enum):
    """Byte-order marks recognised at the head of an export."""
    UTF16_LE = "utf-16-le"
    UTF16_BE = "utf-16-be"
    UTF8 = "utf-8-sig"
    NONE = "none"


@dataclass
class CleanResult:
    """Outcome of rewriting one file with Decoder.clean_file()."""
    path: str
    bom: BomKind
    changed: bool = False
    dropped_leading_char: bool = False
    backup_path: str = ""


class Decoder:
    UTF16_LE_BOM = b"\xff\xfe"
    UTF16_BE_BOM = b"\xfe\xff"
    UTF8_BOM = b"\xef\xbb\xbf"

    CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
    WHITESPACE_CODES = {9, 10, 13, 32}

    @classmethod
    def detect_bom(cls, raw: bytes) -> BomKind:
        if raw.startswith(cls.UTF16_LE_BOM):
            return BomKind.UTF16_LE
        if raw.startswith(cls.UTF16_BE_BOM):
            return BomKind.UTF16_BE
        if raw.startswith(cls.UTF8_BOM):
            return BomKind.UTF8
        return BomKind.NONE

    @classmethod
    def decode(cls, raw: bytes, repair: bool = False) -> str:
        text, _, _ = cls._decode(raw, repair)
        return text

    @classmethod
    def clean_file(cls, path: Union[str, Path], backup: bool = True) -> CleanResult:
        path = Path(path)
        raw = read_bytes(path)

        text, bom, repaired = cls._decode(raw, repair=True)
        result = CleanResult(path=str(path), bom=bom, dropped_leading_char=repaired)

        if bom is BomKind.NONE:
            # Without a BOM only the stray character goes; the rest stays byte for byte
            if not repaired:
                return result
            cleaned = raw[cls._leading_char_width(raw):]
        else:
            cleaned = text.encode("utf-8")
        if cleaned == raw:
            return result

        if backup:
            backup_path = path.with_name(path.name + ".backup")
            shutil.copyfile(path, backup_path)
            result.backup_path = str(backup_path)

        path.write_bytes(cleaned)
        result.changed = True
        return result

    @classmethod
    def _decode(cls, raw: bytes, repair: bool) -> Tuple[str, BomKind, bool]:
        bom = cls.detect_bom(raw)

        if bom is BomKind.UTF16_LE:
            text = raw[2:].decode("utf-16-le", errors="replace")
        elif bom is BomKind.UTF16_BE:
            text = cls._swap_byte_pairs(raw[2:]).decode("utf-16-le", errors="replace")
        elif bom is BomKind.UTF8:
            text = raw[3:].decode("utf-8", errors="replace")
        else:
            text = raw.decode("utf-8", errors="replace")

        repaired = False
        if repair and bom is BomKind.NONE and cls._has_stray_leading_char(text):
            text = text[1:]
            repaired = True

        text = cls.CONTROL_CHARS.sub("", text)
        # A second BOM behind the first one would otherwise survive decoding
        text = text.lstrip("\ufeff")
        return text, bom, repaired

    @classmethod
    def _swap_byte_pairs(cls, data: bytes) -> bytes:
        even = len(data) - (len(data) % 2)
        swapped = bytearray(data[:even])
        swapped[0::2] = data[1:even:2]
        swapped[1::2] = data[0:even:2]
        swapped.extend(data[even:])
        return bytes(swapped)

    @classmethod
    def _leading_char_width(cls, raw: bytes) -> int:
        first = raw[:4].decode("utf-8", errors="replace")[:1]
        if first == "\ufffd" and not raw.startswith(b"\xef\xbf\xbd"):
            # An invalid lead byte stands alone
            return 1
        return len(first.encode("utf-8"))

    @classmethod
    def _has_stray_leading_char(cls, text: str) -> bool:
        if not text or text[0] == "<":
            return False
        code = ord(text[0])
        if code in cls.WHITESPACE_CODES:
            return False
        return code > 127 or code < 32


def read_bytes(path: Union[str, Path]) -> bytes:
    """Read a whole export file, raising DaybookReadError when it is missing or unreadable."""
    path = Path(path)
    if not path.is_file():
        raise DaybookReadError(str(path), "file not found")
    try:
        return path.read_bytes()
    except OSError as e:
        raise DaybookReadError(str(path), str(e)) from e


def decode(raw: bytes, repair: bool = False) -> str:
    return Decoder.decode(raw, repair=repair)
