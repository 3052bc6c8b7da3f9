"""
Tests for the calculation service: data context building, formula test
runs and saved calculations, all over manual in-catalog data.
"""

import pytest

from calculations import CalculationResult, CalculationService
from formula import FormulaEngine
from registry import CalculationInfo, IndicatorInfo
from sources import DataSourceManager, SeriesData

from .conftest import monthly


class TestBuildDataContext:

    def test_fetches_each_indicator(self, service):
        context, errors = service.build_data_context(['GDP', 'cpi'])
        assert errors == {}
        assert context['gdp'][0] == ('2020-01-01', 100.0)
        assert context['cpi'] == [('2020-01-01', 10.0), ('2021-01-01', 11.0), ('2022-01-01', 12.5)]

    def test_reports_unknown_and_failed(self, service):
        context, errors = service.build_data_context(['nothing', 'broken', 'retired'])
        assert context == {}
        assert errors['nothing'] == "Indicator not found: nothing"
        assert errors['retired'] == "Indicator not found: retired"
        assert 'points must be a list' in errors['broken']

    def test_date_range(self, service):
        context, _ = service.build_data_context(['gdp'], '2020-04-01', '2020-07-01')
        assert context['gdp'] == [('2020-04-01', 102.0), ('2020-07-01', 101.0)]


class TestExecuteFormula:

    def test_success(self, service):
        result = service.execute_formula("SUM(X)", {"x": [("2020-01-01", 2.0), ("2020-02-01", 3.0)]})
        assert result.ok
        assert result.result == 5.0
        assert result.indicators_used == ['x']

    def test_error_keeps_engine_message(self, service):
        result = service.execute_formula("MA(X)", {"x": []})
        assert not result.ok
        assert result.error == "MA function requires exactly 2 parameters: series, periods (got 1)"
        assert result.error_code == 'wrong_arity'

    def test_to_dict(self, service):
        payload = service.execute_formula("MA(X,1)", {"x": [("2020-01-01", 2.0)]}).to_dict()
        assert payload['result'] == {'type': 'series', 'points': 1, 'series': [['2020-01-01', 2.0]]}
        assert 'error' not in payload


class TestTestFormula:

    def test_infers_indicators(self, service):
        result = service.test_formula("CORRELATION(GDP, CPI)")
        assert result.ok
        assert result.indicators_used == ['cpi', 'gdp']
        # trailing three of GDP (102, 101, 105) against CPI (10, 11, 12.5)
        assert result.result == pytest.approx(0.79536, abs=1e-4)

    def test_explicit_indicators(self, service):
        result = service.test_formula("AVG(GDP)", indicators=['gdp'])
        assert result.result == pytest.approx(102.0)

    def test_date_range_applies(self, service):
        result = service.test_formula("COUNT(GDP)", start_date='2020-06-01', end_date='2020')
        assert result.ok
        assert result.result == 0

    def test_year_bounds(self, service):
        result = service.test_formula("COUNT(CPI)", start_date='2021', end_date='2022')
        assert result.result == 2

    def test_validates_before_fetching(self, catalog):
        class ExplodingSources:
            def fetch_sync(self, *args):
                raise AssertionError("should not fetch")

        service = CalculationService(engine=FormulaEngine(), catalog=catalog, sources=ExplodingSources())
        for formula, code in [("", 'empty_formula'), ("NOPE(GDP)", 'unknown_function'),
                              ("MA(GDP)", 'wrong_arity'), ("GDP +", 'invalid_expression')]:
            result = service.test_formula(formula)
            assert result.error_code == code

    def test_missing_indicator(self, service):
        result = service.test_formula("SUM(UNKNOWN_THING)")
        assert result.error == "Indicator not found: unknown_thing"
        assert result.fetch_errors == {'unknown_thing': "Indicator not found: unknown_thing"}

    def test_fetch_failure_surfaces(self, service):
        result = service.test_formula("SUM(BROKEN)")
        assert result.error_code == 'unknown_identifier'
        assert 'broken' in result.to_dict()['fetch_errors']

    def test_invalid_date(self, service):
        result = service.test_formula("SUM(GDP)", start_date='whenever')
        assert result.error_code == 'invalid_date'

    def test_max_depth_from_engine(self, catalog, sources):
        service = CalculationService(engine=FormulaEngine(max_depth=1), catalog=catalog, sources=sources)
        result = service.test_formula("SUM(MA(GDP,2))")
        assert result.error_code == 'max_depth_exceeded'


class TestSavedCalculations:

    def test_value_calculation(self, service):
        result = service.get_calculation_result('GDP_AVG')
        assert isinstance(result, CalculationResult)
        assert result.result == pytest.approx(102.0)
        payload = result.to_dict()
        assert payload['calculation']['slug'] == 'gdp_avg'
        assert payload['calculation']['output_type'] == 'value'
        assert payload['result'] == {'type': 'scalar', 'value': pytest.approx(102.0)}

    def test_indicators_inferred_when_not_listed(self, service):
        result = service.get_calculation_result('gdp_ma', end_date='2020-07-01')
        assert result.indicators_used == ['gdp']
        assert result.result == [('2020-04-01', 101.0), ('2020-07-01', 101.5)]

    def test_formula_error(self, service):
        result = service.get_calculation_result('bad_formula')
        assert result.error_code == 'wrong_arity'
        assert result.to_dict()['calculation']['formula'] == 'MA(GDP)'

    def test_unknown_slug(self, service):
        assert service.get_calculation_result('nope') is None


def test_cache_is_used(catalog):
    class CountingManual:
        source_type = 'manual'
        name = 'Counting'
        available = True
        calls = 0

        def supports(self, source_type):
            return source_type == 'manual'

        def fetch_sync(self, source_config):
            CountingManual.calls += 1
            return SeriesData('x', ['2020-01-01'], [1.0])

    from cache import CacheManager
    sources = DataSourceManager(sources=[CountingManual()], cache=CacheManager(max_size=10, ttl=60))
    indicator = IndicatorInfo(slug='a', name='A', source_type='manual', source_config={'points': []})

    first = sources.fetch_sync(indicator)
    second = sources.fetch_sync(indicator, start_date='2021-01-01')
    assert CountingManual.calls == 1
    assert first.values == [1.0]
    assert second.values == []
    assert first.info['name'] == 'A'


def test_unknown_source_type_is_reported(sources):
    indicator = IndicatorInfo(slug='odd', name='Odd', source_type='telegraph', source_config={})
    data = sources.fetch_sync(indicator)
    assert not data.is_valid
    assert data.error == "No data source found for type 'telegraph'"
    assert set(sources.available_sources()) == {'manual'}


def test_available_functions(service):
    catalog = service.available_functions()
    assert set(catalog) == {'basic', 'technical', 'advanced'}
    assert catalog['technical']['MA']['syntax'] == 'MA(series, periods)'


# =============================================================================
# Test-run window
# =============================================================================

@pytest.fixture
def long_catalog(catalog):
    points = [[d, v] for d, v in monthly(range(150))]
    catalog.register_indicator(IndicatorInfo(slug='big', name='Big', source_type='manual',
                                             source_config={'points': points}))
    catalog.register_calculation(CalculationInfo(slug='big_count', name='Big count', formula='COUNT(BIG)'))
    return catalog


class TestTestRunWindow:

    def test_formula_test_uses_latest_points(self, service, long_catalog):
        assert service.test_formula("COUNT(BIG)").result == 100
        assert service.test_formula("MIN(BIG)").result == 50

    def test_window_is_configurable(self, long_catalog, sources):
        service = CalculationService(engine=FormulaEngine(), catalog=long_catalog, sources=sources, test_points=5)
        assert service.test_formula("COUNT(BIG)").result == 5

    def test_saved_calculation_uses_full_series(self, service, long_catalog):
        assert service.get_calculation_result('big_count').result == 150

    def test_build_data_context_without_limit(self, service, long_catalog):
        context, _ = service.build_data_context(['big'])
        assert len(context['big']) == 150
