import pprint
from datetime import datetime
from django.core.management.base import BaseCommand, CommandError
from site_analytics.analytics import analytics_from_settings
from site_analytics.period import Period
from site_analytics.utils import InvalidPeriod, InvalidConfiguration

import logging
LOG = logging.getLogger(__name__)

# report name => (method name, accepts `max_results`, accepts `page`)
REPORTS = {
    'visitors-and-page-views': ('fetch_visitors_and_page_views', False, True),
    'total-visitors-and-page-views': ('fetch_total_visitors_and_page_views', False, True),
    'most-visited-pages': ('fetch_most_visited_pages', True, False),
    'top-sources': ('fetch_top_sources', True, True),
    'top-countries': ('fetch_top_countries', True, True),
    'top-devices': ('fetch_top_devices', True, True),
    'top-browsers': ('fetch_top_browsers', True, True),
}

def ymd_arg(string):
    return datetime.strptime(string, "%Y-%m-%d").date()

def get_period(options):
    if options['start'] or options['end']:
        if not (options['start'] and options['end']):
            raise InvalidPeriod("both --start and --end are required for a date range")
        return Period.create(options['start'], options['end'])
    return Period.days(options['days'])

class Command(BaseCommand):
    help = 'fetches one of the canned Google Analytics reports and prints the results'

    def add_arguments(self, parser):
        parser.add_argument('--report', required=True, choices=sorted(REPORTS.keys()))
        parser.add_argument('--days', type=int, default=7)
        parser.add_argument('--start', type=ymd_arg, default=None)
        parser.add_argument('--end', type=ymd_arg, default=None)
        parser.add_argument('--max-results', type=int, dest='max_results', default=None)
        parser.add_argument('--page', default=None)
        parser.add_argument('--view-id', dest='view_id', default=None)

    def handle(self, *args, **options):
        method_name, takes_max_results, takes_page = REPORTS[options['report']]
        if options['max_results'] is not None and options['max_results'] < 1:
            raise CommandError("--max-results must be a positive integer, not %s" % options['max_results'])
        kwargs = {}
        if takes_max_results and options['max_results'] is not None:
            kwargs['max_results'] = options['max_results']
        if takes_page and options['page']:
            kwargs['page'] = options['page']

        try:
            period = get_period(options)
            analytics = analytics_from_settings(options['view_id'])
        except (InvalidPeriod, InvalidConfiguration) as err:
            raise CommandError(str(err))

        LOG.info("fetching %r for %s to %s", options['report'], period.start_date, period.end_date)
        result = getattr(analytics, method_name)(period, **kwargs)
        self.stdout.write(pprint.pformat(result))
        self.stdout.flush()
