from datetime import date
from unittest import mock
import pytest
from django.test import override_settings
from site_analytics import analytics
from site_analytics.analytics import Analytics
from site_analytics.period import Period
from site_analytics.utils import InvalidConfiguration
from . import base

PERIOD = Period.create(date(year=2023, month=1, day=1), date(year=2023, month=1, day=31))

def test_perform_query():
    executor = base.DummyExecutor(response={'rows': []})
    Analytics(executor, '12345').perform_query(PERIOD, 'ga:sessions', {'dimensions': 'ga:browser'})
    expected = {
        'view_id': '12345',
        'start_date': PERIOD.start_date,
        'end_date': PERIOD.end_date,
        'metrics': 'ga:sessions',
        'others': {'dimensions': 'ga:browser'},
    }
    assert expected == executor.last_query

def test_perform_query_no_others():
    executor = base.DummyExecutor(response={})
    Analytics(executor, '12345').perform_query(PERIOD, 'ga:sessions')
    assert {} == executor.last_query['others']

def test_view_id_required():
    for case in [None, '']:
        with pytest.raises(InvalidConfiguration):
            Analytics(base.DummyExecutor(), case)

def test_with_view_id():
    executor = base.DummyExecutor(response={})
    original = Analytics(executor, '12345')
    other = original.with_view_id('67890')
    assert '12345' == original.view_id
    assert '67890' == other.view_id

    other.perform_query(PERIOD, 'ga:sessions')
    assert '67890' == executor.last_query['view_id']

    original.perform_query(PERIOD, 'ga:sessions')
    assert '12345' == executor.last_query['view_id']

def test_analytics_service():
    assert 'dummy-service' == Analytics(base.DummyExecutor(), '12345').analytics_service()

def test_empty_results():
    "every report returns an empty list when GA has no rows for it"
    responses = [None, {}, {'rows': []}, base.fixture_json('no-rows.json')]
    for response in responses:
        report = Analytics(base.DummyExecutor(response=response), '12345')
        assert [] == report.fetch_visitors_and_page_views(PERIOD)
        assert [] == report.fetch_total_visitors_and_page_views(PERIOD)
        assert [] == report.fetch_most_visited_pages(PERIOD)
        assert [] == report.fetch_top_sources(PERIOD, page='does-not-exist')
        assert [] == report.fetch_top_countries(PERIOD)
        assert [] == report.fetch_top_devices(PERIOD)
        assert [] == report.fetch_top_browsers(PERIOD)

def test_fetch_visitors_and_page_views():
    executor = base.DummyExecutor(response=base.fixture_json('visitors-and-page-views.json'))
    results = Analytics(executor, '12345').fetch_visitors_and_page_views(PERIOD, page='blog')

    assert 'ga:users,ga:pageviews' == executor.last_query['metrics']
    expected_others = {'dimensions': 'ga:date,ga:pageTitle', 'filters': 'ga:pagePath=@/blog'}
    assert expected_others == executor.last_query['others']

    assert 4 == len(results)
    assert date(year=2023, month=1, day=15) == results[2]['date']
    assert 139 == results[2]['page_views']

def test_fetch_most_visited_pages():
    response = {'rows': [['/', 'Home', '1000'], ['/blog', 'Blog', '42']]}
    executor = base.DummyExecutor(response=response)
    results = Analytics(executor, '12345').fetch_most_visited_pages(PERIOD, max_results=2)

    others = executor.last_query['others']
    assert 'ga:pagePath,ga:pageTitle' == others['dimensions']
    assert '-ga:pageviews' == others['sort']
    assert 2 == others['max-results']
    assert 'filters' not in others

    expected = [
        {'url': '/', 'page_title': 'Home', 'page_views': 1000},
        {'url': '/blog', 'page_title': 'Blog', 'page_views': 42},
    ]
    assert expected == results

def test_fetch_top_countries():
    executor = base.DummyExecutor(response={'rows': [['Canada', '20', '57']]})
    results = Analytics(executor, '12345').fetch_top_countries(PERIOD, max_results=5, page='/blog')
    expected_others = {
        'dimensions': 'ga:country',
        'sort': '-ga:sessions,-ga:pageviews',
        'max-results': 5,
        'filters': 'ga:pagePath=@/blog',
    }
    assert expected_others == executor.last_query['others']
    assert [{'country': 'Canada', 'sessions': 20, 'page_views': 57}] == results

def test_fetch_top_browsers():
    executor = base.DummyExecutor(response=base.fixture_json('top-browsers.json'))
    results = Analytics(executor, '12345').fetch_top_browsers(PERIOD)

    # the cap is never sent to GA
    assert 'max-results' not in executor.last_query['others']

    assert 10 == len(results)
    assert {'browser': 'Chrome', 'sessions': 6120} == results[0]
    assert {'browser': 'Internet Explorer', 'sessions': 51} == results[8]
    # YaBrowser is the 10th browser, so summarized with the two after it
    assert {'browser': 'Others', 'sessions': 32 + 14 + 7} == results[-1]
    assert 10000 == sum(browser['sessions'] for browser in results)

def test_fetch_top_browsers_under_cap():
    executor = base.DummyExecutor(response=base.fixture_json('top-browsers.json'))
    results = Analytics(executor, '12345').fetch_top_browsers(PERIOD, max_results=20)
    assert 12 == len(results)
    assert 'Others' not in [browser['browser'] for browser in results]

def test_fetch_top_browsers_bad_cap_not_queried():
    "a bad cap is rejected before GA is queried"
    executor = base.DummyExecutor(response=base.fixture_json('top-browsers.json'))
    for case in [0, -1, None, '3']:
        with pytest.raises(ValueError):
            Analytics(executor, '12345').fetch_top_browsers(PERIOD, max_results=case)
    assert [] == executor.calls

def test_executor_errors_propagate():
    "failures talking to GA are not caught or retried by the reports"
    executor = base.DummyExecutor(raises=RuntimeError("quota exceeded"))
    with pytest.raises(RuntimeError):
        Analytics(executor, '12345').fetch_top_devices(PERIOD)
    assert 1 == len(executor.calls)

@override_settings(ANALYTICS_VIEW_ID='12345')
def test_analytics_from_settings():
    with mock.patch('site_analytics.analytics.analytics_client', return_value=base.DummyExecutor()):
        assert '12345' == analytics.analytics_from_settings().view_id
        assert '67890' == analytics.analytics_from_settings('67890').view_id

@override_settings(ANALYTICS_VIEW_ID=None)
def test_analytics_from_settings_no_view_id():
    with mock.patch('site_analytics.analytics.analytics_client') as client:
        with pytest.raises(InvalidConfiguration):
            analytics.analytics_from_settings()
        assert not client.called
