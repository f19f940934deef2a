"""Single-function surface for embedding ztarcc in other programs.

Usage:
    from ztarcc.embed import convert_codes
    convert_codes("cn", "tw", "我能吞下玻璃而不伤身体。")
"""

from typing import Optional

from .pipeline import Converter, convert
from .schema import Script

# Regional codes only; the standard form is an internal intermediate here
CODES = {
    "cn": Script.CN,
    "tw": Script.TW,
    "hk": Script.HK,
}


def convert_codes(
    from_code: str,
    to_code: str,
    text: str,
    converter: Optional[Converter] = None,
) -> str:
    """Convert text between two script codes and join the result.

    Raises:
        ValueError: On an unknown code; the message is the error string.
        LoadError: If the compiled dictionaries cannot be loaded.
    """
    source = CODES.get(from_code)
    if source is None:
        raise ValueError(f"invalid from script {from_code}")
    target = CODES.get(to_code)
    if target is None:
        raise ValueError(f"invalid to script {to_code}")
    return "".join(convert(source, target, text, converter=converter))
