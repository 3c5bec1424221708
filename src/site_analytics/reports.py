"""canned report queries and the parsing of their results.

each report is a pair of functions: `<report>_query` returns a `(metrics, others)` pair
that can be handed to the query executor and `<report>` turns the rows of the response
into a list of records. row cells are positional, in the order of the query's dimensions
followed by its metrics."""

# Analytics API:
# - https://developers.google.com/analytics/devguides/reporting/core/v3/reference
# - https://developers.google.com/analytics/devguides/reporting/core/v3/reference#filters

from .utils import ensure, lmap, parse_ymd
import logging

LOG = logging.getLogger(__name__)

OTHERS = 'Others'

def escape_filter_value(value):
    "backslash-escapes the characters that are special in a GA filter expression"
    for char in ['\\', ',', ';']:
        value = value.replace(char, '\\' + char)
    return value

def page_filter(page=None):
    """returns a filter matching page paths that contain '/`page`', or `None` if no page given.
    a leading slash on `page` is not doubled: 'blog' and '/blog' are the same filter."""
    if not page:
        return None
    # '=@' is 'contains substring'
    return "ga:pagePath=@/" + escape_filter_value(page.lstrip('/'))

def query(dimensions, sort=None, max_results=None, page=None):
    "returns an `others` map with just the options that have a value"
    others = {
        'dimensions': dimensions,
        'sort': sort,
        'max-results': max_results,
        'filters': page_filter(page),
    }
    return {key: val for key, val in others.items() if val is not None}

def rows(response):
    "the list of rows in the given GA `response`. no rows is an empty list and not an error."
    return (response or {}).get('rows') or []

#
# visitors and pageviews
#

def visitors_and_page_views_query(page=None):
    return 'ga:users,ga:pageviews', query('ga:date,ga:pageTitle', page=page)

def visitors_and_page_views(row_list):
    def parse(row):
        return {
            'date': parse_ymd(row[0]),
            'page_title': row[1],
            'visitors': int(row[2]),
            'page_views': int(row[3]),
        }
    return lmap(parse, row_list)

def total_visitors_and_page_views_query(page=None):
    return 'ga:visits', query('ga:date', page=page)

def total_visitors_and_page_views(row_list):
    def parse(row):
        return {
            'date': parse_ymd(row[0]),
            'visits': int(row[1]),
        }
    return lmap(parse, row_list)

#
# pages
#

def most_visited_pages_query(max_results=20):
    return 'ga:pageviews', query('ga:pagePath,ga:pageTitle', sort='-ga:pageviews', max_results=max_results)

def most_visited_pages(row_list):
    def parse(row):
        return {
            'url': row[0],
            'page_title': row[1],
            'page_views': int(row[2]),
        }
    return lmap(parse, row_list)

#
# audience
#

def top_sources_query(max_results=20, page=None):
    return 'ga:pageviews', query('ga:source,ga:medium', sort='-ga:pageviews', max_results=max_results, page=page)

def top_sources(row_list):
    def parse(row):
        return {
            'source': row[0],
            'medium': row[1],
            'page_views': int(row[2]),
        }
    return lmap(parse, row_list)

def top_countries_query(max_results=20, page=None):
    return 'ga:sessions,ga:pageviews', query('ga:country', sort='-ga:sessions,-ga:pageviews', max_results=max_results, page=page)

def top_countries(row_list):
    def parse(row):
        return {
            'country': row[0],
            'sessions': int(row[1]),
            'page_views': int(row[2]),
        }
    return lmap(parse, row_list)

def top_devices_query(max_results=20, page=None):
    return 'ga:sessions', query('ga:deviceCategory', sort='-ga:sessions', max_results=max_results, page=page)

def top_devices(row_list):
    def parse(row):
        return {
            'device': row[0],
            'sessions': int(row[1]),
        }
    return lmap(parse, row_list)

def top_browsers_query(page=None):
    # no 'max-results', the long tail is summarized locally
    return 'ga:sessions', query('ga:browser', sort='-ga:sessions', page=page)

def top_browsers(row_list):
    def parse(row):
        return {
            'browser': row[0],
            'sessions': int(row[1]),
        }
    return lmap(parse, row_list)

def ensure_browser_cap(max_results):
    ensure(isinstance(max_results, int) and max_results > 0,
           "`max_results` must be a positive integer, not %r" % (max_results,), ValueError)

def summarize_top_browsers(browser_list, max_results):
    """keeps the first `max_results - 1` browsers and collapses the rest into a single 'Others' browser.
    `browser_list` is expected to be sorted by sessions, descending. it is not re-sorted."""
    ensure_browser_cap(max_results)
    if len(browser_list) <= max_results:
        return browser_list
    top, rest = browser_list[:max_results - 1], browser_list[max_results - 1:]
    LOG.debug("summarizing %s browsers as %r", len(rest), OTHERS)
    return top + [{
        'browser': OTHERS,
        'sessions': sum(browser['sessions'] for browser in rest),
    }]
