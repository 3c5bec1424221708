from django.conf import settings
import logging
from . import reports
from .client import analytics_client
from .utils import ensure, InvalidConfiguration

LOG = logging.getLogger(__name__)

class Analytics(object):
    """fetches canned reports for a single GA view.

    `executor` is anything with a `perform_query(view_id, start_date, end_date, metrics, others)`
    method, usually an `AnalyticsClient`. instances are not modified after creation, use
    `with_view_id` to report on a different view."""

    def __init__(self, executor, view_id):
        ensure(view_id, "a view id is required", InvalidConfiguration)
        self._executor = executor
        self._view_id = str(view_id)

    @property
    def view_id(self):
        return self._view_id

    def with_view_id(self, view_id):
        "returns a new `Analytics` for `view_id` using the same executor"
        return Analytics(self._executor, view_id)

    def perform_query(self, period, metrics, others=None):
        "executes a query for `metrics` over the given `period` against this view"
        return self._executor.perform_query(
            self._view_id,
            period.start_date,
            period.end_date,
            metrics,
            others or {},
        )

    def analytics_service(self):
        "the underlying googleapiclient service. anything the reporting api supports can be called on it."
        return self._executor.analytics_service()

    def _fetch(self, period, query_pair, parser):
        metrics, others = query_pair
        response = self.perform_query(period, metrics, others)
        return parser(reports.rows(response))

    #
    #
    #

    def fetch_visitors_and_page_views(self, period, page=None):
        return self._fetch(period, reports.visitors_and_page_views_query(page), reports.visitors_and_page_views)

    def fetch_total_visitors_and_page_views(self, period, page=None):
        return self._fetch(period, reports.total_visitors_and_page_views_query(page), reports.total_visitors_and_page_views)

    def fetch_most_visited_pages(self, period, max_results=20):
        return self._fetch(period, reports.most_visited_pages_query(max_results), reports.most_visited_pages)

    def fetch_top_sources(self, period, max_results=20, page=None):
        return self._fetch(period, reports.top_sources_query(max_results, page), reports.top_sources)

    def fetch_top_countries(self, period, max_results=20, page=None):
        return self._fetch(period, reports.top_countries_query(max_results, page), reports.top_countries)

    def fetch_top_devices(self, period, max_results=20, page=None):
        return self._fetch(period, reports.top_devices_query(max_results, page), reports.top_devices)

    def fetch_top_browsers(self, period, max_results=10, page=None):
        "the browsers with the most sessions. beyond `max_results` the remainder is summed as 'Others'."
        reports.ensure_browser_cap(max_results)
        browser_list = self._fetch(period, reports.top_browsers_query(page), reports.top_browsers)
        return reports.summarize_top_browsers(browser_list, max_results)

def analytics_from_settings(view_id=None):
    "an `Analytics` instance for `view_id`, or the configured view, using the authenticated GA client"
    view_id = view_id or settings.ANALYTICS_VIEW_ID
    ensure(view_id, "no view id given and ANALYTICS_VIEW_ID is not configured", InvalidConfiguration)
    LOG.debug("reporting on view %s", view_id)
    return Analytics(analytics_client(), view_id)
