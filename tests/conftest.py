"""Shared fixtures for the test suite."""

import pytest

from cache import CacheManager
from calculations import CalculationService
from formula import FormulaEngine
from registry import CalculationInfo, CatalogRegistry, IndicatorInfo
from sources import DataSourceManager, ManualSource


def monthly(values, year=2020):
    """[(date, value), ...] with one point per month starting in January."""
    return [(f"{year + i // 12}-{i % 12 + 1:02d}-01", v) for i, v in enumerate(values)]


@pytest.fixture
def linear_series():
    return monthly([1, 2, 3, 4])


@pytest.fixture
def engine():
    return FormulaEngine()


@pytest.fixture
def catalog():
    catalog = CatalogRegistry()
    catalog.register_indicator(IndicatorInfo(
        slug='gdp', name='GDP', source_type='manual',
        source_config={'points': [['2020-01-01', 100], ['2020-04-01', 102],
                                  ['2020-07-01', 101], ['2020-10-01', 105]]},
    ))
    catalog.register_indicator(IndicatorInfo(
        slug='cpi', name='CPI', source_type='manual',
        source_config={'points': [['2020', 10], ['2021', 11], ['2022', 12.5]]},
    ))
    catalog.register_indicator(IndicatorInfo(
        slug='broken', name='Broken', source_type='manual',
        source_config={'points': 'not a list'},
    ))
    catalog.register_indicator(IndicatorInfo(
        slug='retired', name='Retired', source_type='manual',
        source_config={'points': []}, is_active=False,
    ))
    catalog.register_calculation(CalculationInfo(
        slug='gdp_avg', name='Average GDP', formula='AVG(GDP)', indicators=['gdp'],
        output_type='value',
    ))
    catalog.register_calculation(CalculationInfo(
        slug='gdp_ma', name='GDP Moving Average', formula='MA(GDP, 2)',
    ))
    catalog.register_calculation(CalculationInfo(
        slug='bad_formula', name='Bad', formula='MA(GDP)', indicators=['gdp'],
    ))
    return catalog


@pytest.fixture
def sources():
    return DataSourceManager(sources=[ManualSource()], cache=CacheManager(max_size=100, ttl=60))


@pytest.fixture
def service(catalog, sources):
    return CalculationService(engine=FormulaEngine(), catalog=catalog, sources=sources, test_points=100)
