"""Shared ephemeris fixtures"""

import numpy as np
import pytest

from pysatpos.core.data_structures import EphemerisRecord
from pysatpos.satellite.ephemeris import RAW_EPHEMERIS_INDEX

# Representative broadcast values for a GPS satellite
NOMINAL_ORBIT = dict(
    A=5153.7**2, e=0.0105, i0=0.9634, OMG0=-1.2743, omg=0.8731, M0=2.1385,
    deln=4.53e-9, OMGd=-8.07e-9, idot=2.1e-10,
    cuc=-1.53e-6, cus=8.28e-6, crc=221.4, crs=-29.6, cic=-1.12e-7, cis=7.45e-8,
    f0=1.79e-4, f1=-5.0e-12, f2=0.0, tgd=-1.1e-8,
    toc=345600.0, toe=345600.0,
)


def make_ephemeris(**overrides):
    params = dict(NOMINAL_ORBIT, prn=5, week=2200, reference_time=338400.0)
    params.update(overrides)
    return EphemerisRecord(**params)


def make_raw_ephemeris(prn=5, tow=338400.0, health=0, week=2200, **orbit):
    values = dict(NOMINAL_ORBIT, **orbit)
    raw = np.zeros(32)
    for key, v in values.items():
        raw[RAW_EPHEMERIS_INDEX[key]] = v
    raw[RAW_EPHEMERIS_INDEX['prn']] = prn
    raw[RAW_EPHEMERIS_INDEX['tow']] = tow
    raw[RAW_EPHEMERIS_INDEX['health']] = health
    raw[RAW_EPHEMERIS_INDEX['week']] = week
    raw[RAW_EPHEMERIS_INDEX['zweek']] = week
    raw[RAW_EPHEMERIS_INDEX['iode1']] = 42
    raw[RAW_EPHEMERIS_INDEX['iode2']] = 42
    raw[RAW_EPHEMERIS_INDEX['iodc']] = 42
    raw[RAW_EPHEMERIS_INDEX['ura']] = 4.0
    return raw


@pytest.fixture
def ephemeris():
    return make_ephemeris()


@pytest.fixture
def circular_ephemeris():
    """Circular orbit with no perturbations or clock terms"""
    return make_ephemeris(
        e=0.0, deln=0.0, OMGd=0.0, idot=0.0,
        cuc=0.0, cus=0.0, crc=0.0, crs=0.0, cic=0.0, cis=0.0,
        f0=0.0, f1=0.0, f2=0.0, tgd=0.0,
    )


@pytest.fixture
def make_eph():
    """Factory for ephemeris records with overridden fields"""
    return make_ephemeris


@pytest.fixture
def make_raw():
    """Factory for raw 32-value receiver ephemeris records"""
    return make_raw_ephemeris
