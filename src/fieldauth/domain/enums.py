"""Enumerations used across the fieldauth domain layer."""

from __future__ import annotations

from enum import StrEnum


class Unit(StrEnum):
    """Organization unit types."""

    WING = "WING"
    GROUP = "GROUP"
    SQUADRON = "SQUADRON"
    FLIGHT = "FLIGHT"
    OTHER_USAF = "OTHER_USAF"
    ORGANIZATION = "ORGANIZATION"


class Branch(StrEnum):
    """Service branch an organization belongs to."""

    USAF = "USAF"
    USSF = "USSF"
    USA = "USA"
    USN = "USN"
    USMC = "USMC"
    USCG = "USCG"
    OTHER = "OTHER"
