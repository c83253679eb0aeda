# companies.py
from __future__ import annotations

from dataclasses import dataclass, field

PAKTECH = "Paktech"
LINK_LINES = "Link Lines"
TECHNO = "Techno"


@dataclass(frozen=True)
class CompanyProfile:
    key: str
    name: str
    info: tuple[str, ...] = ()
    footer_address: str = ""
    footer_contact: str = ""
    footer_link: str = ""
    header_image: str | None = None
    header_box: tuple[float, float, float, float] = (0, 0, 0, 0)  # x, y, w, h in mm
    font: str = "Helvetica"
    title_size: float = 14
    text_size: float = 9
    header_color: tuple[int, int, int] = (0, 0, 0)
    head_fill: tuple[int, int, int] = (200, 200, 200)
    head_text: tuple[int, int, int] = (0, 0, 0)
    ntn: str = "0615834-0"
    gst: str = "12-00-9999-125-55"
    supplier_lines: tuple[str, ...] = field(default_factory=tuple)


COMPANIES: dict[str, CompanyProfile] = {
    PAKTECH: CompanyProfile(
        key=PAKTECH,
        name="Paktech Instrumentation Co.",
        info=(
            "236, Street # 17, Block-3, Sharafabad, Karachi",
            "0213-4949215  |  info@paktech1.com",
        ),
        font="Helvetica",
        title_size=18,
        text_size=10,
        header_color=(0, 0, 0),
        head_fill=(200, 200, 200),
        head_text=(0, 0, 0),
        supplier_lines=(
            "Supplier Name: Paktech Instrument Co.",
            "Address: 236, 1st Floor, Street 17,",
            "Block-3 Sharafabad Karachi",
            "NTN: 0615834-0  GST#: 12-00-9999-125-55",
            "Phone: 34949215",
        ),
    ),
    LINK_LINES: CompanyProfile(
        key=LINK_LINES,
        name="Link Lines Enterprises",
        info=(
            "Link Lines Enterprises",
            "Office No. 12, 2nd Floor,",
            "Gulberg Plaza, Karachi-75500, Pakistan",
            "Tel: +92-21-987 654 321",
            "www.linklines.com",
        ),
        footer_address="OFFICE NO. 12, GULBERG PLAZA, KARACHI 75500=PAKISTAN",
        footer_contact="TEL: (92 21) 98765432   E-MAIL: contact@linklines.com   Web: www.linklines.com",
        footer_link="http://www.linklines.com",
        header_image="linklines_header.png",
        header_box=(14, 10, 80, 25),
        font="Times",
        title_size=14,
        text_size=9,
        header_color=(0, 128, 0),
        head_fill=(0, 128, 0),
        head_text=(255, 255, 255),
    ),
    TECHNO: CompanyProfile(
        key=TECHNO,
        name="Techno Instruments",
        info=(
            "Techno Instruments",
            "Suite 101, Business Tower,",
            "Saddar, Karachi-74000, Pakistan",
            "Tel: +92-21-123 456 789",
            "www.technoinstruments.com",
        ),
        footer_address="SUITE 101, BUSINESS TOWER, SADDAR, KARACHI 74000=PAKISTAN",
        footer_contact="TEL: (92 21) 12345678   E-MAIL: info@technoinstruments.com   Web: www.technoinstruments.com",
        footer_link="http://www.technoinstruments.com",
        header_image="techno_header.png",
        header_box=(15, 10, 180, 20),
        font="Courier",
        title_size=14,
        text_size=9,
        header_color=(20, 50, 100),
        head_fill=(20, 50, 100),
        head_text=(255, 255, 255),
    ),
}


def company_profile(key: str | None) -> CompanyProfile:
    # Unknown companies print on the Techno letterhead.
    return COMPANIES.get((key or "").strip(), COMPANIES[TECHNO])
