# LeadMarket - Lead Marketplace Core
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Free-text vehicle parsing, kept separate from carrier math."""

from beartype import beartype

from ...models.rating import VehicleDescriptor

EARLIEST_MODEL_YEAR = 1990


@beartype
def parse_car_model(text: str, current_year: int) -> VehicleDescriptor:
    """Parse a "YYYY Make Model" string into year, make and model.

    A leading 4-digit token in [1990, current_year + 1] is taken as the
    model year, the next token as make and the rest as model. Without such
    a token the year defaults to ``current_year``, the first token is the
    make and the rest is the model.

    Args:
        text: Vehicle description as typed, e.g. "2019 Honda Civic LX"
        current_year: Year used for the fallback and the upper bound

    Returns:
        VehicleDescriptor with the parsed parts
    """
    parts = text.split()
    if not parts:
        return VehicleDescriptor(year=current_year)

    year = _parse_year(parts[0], current_year)
    if year is not None:
        make, model = _split_make_model(parts[1:])
        return VehicleDescriptor(year=year, make=make, model=model)

    make, model = _split_make_model(parts)
    return VehicleDescriptor(year=current_year, make=make, model=model)


def _split_make_model(parts: list[str]) -> tuple[str, str]:
    if not parts:
        return "", ""
    return parts[0], " ".join(parts[1:])


def _parse_year(token: str, current_year: int) -> int | None:
    # Leading digits only, so "2019," still counts as a year
    digits = ""
    for char in token:
        if not char.isdigit():
            break
        digits += char
    if len(digits) != 4:
        return None
    year = int(digits)
    if EARLIEST_MODEL_YEAR <= year <= current_year + 1:
        return year
    return None
