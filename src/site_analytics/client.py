# Analytics API:
# https://developers.google.com/analytics/devguides/reporting/core/v3/reference

import os
import time, random
import googleapiclient.discovery
import googleapiclient.errors
import oauth2client.client
import oauth2client.service_account
import httplib2
from kids.cache import cache
from django.conf import settings
import logging
from .utils import ensure, ymd, norm_view_id, InvalidConfiguration

LOG = logging.getLogger(__name__)

SCOPE = 'https://www.googleapis.com/auth/analytics.readonly'

def build_ga_service(settings_file):
    "returns an authenticated `analytics` v3 service using the service account key file at `settings_file`"
    service_name = 'analytics'
    ensure(os.path.exists(settings_file),
           "client-secrets.json not found. I looked here: %s" % settings_file, InvalidConfiguration)
    credentials = oauth2client.service_account.ServiceAccountCredentials.from_json_keyfile_name(settings_file, scopes=[SCOPE])
    http = httplib2.Http()
    credentials.authorize(http)
    # `cache_discovery=False`:
    # - https://github.com/googleapis/google-api-python-client/issues/299
    # - https://github.com/googleapis/google-api-python-client/issues/345
    service = googleapiclient.discovery.build(service_name, 'v3', http=http, cache_discovery=False)
    return service

@cache
def ga_service():
    return build_ga_service(settings.GA_SECRETS_LOCATION)

def backoff(attempt, status_code):
    "seconds to wait before attempt number `attempt + 1`. a 503 waits twice as long as a 403."
    ms_dither = random.randint(0, 1000) / 1000
    seconds = 2 ** attempt # 2**0 => 1, 2**1 => 2, 2**2 => 4, 2**3 => 8
    if status_code == 503:
        seconds = seconds * 2
    return seconds + ms_dither

def query_map(view_id, start_date, end_date, metrics, others=None):
    """returns the keyword arguments for `data().ga().get(...)`.
    option keys use the api's hyphenated names ('max-results'), the client library wants underscores."""
    query = {
        'ids': norm_view_id(view_id),
        'start_date': ymd(start_date),
        'end_date': ymd(end_date),
        'metrics': metrics,
    }
    for key, val in (others or {}).items():
        query[key.replace('-', '_')] = val
    return query

class AnalyticsClient(object):
    def __init__(self, service, num_attempts=5):
        ensure(num_attempts > 0, "`num_attempts` must be greater than zero")
        self.service = service
        self.num_attempts = num_attempts

    def analytics_service(self):
        "the underlying googleapiclient `analytics` service, for anything not covered by the reports."
        return self.service

    # pylint: disable=E1101
    def perform_query(self, view_id, start_date, end_date, metrics, others=None):
        "talks to google with the given query, applying exponential back-off if rate limited"
        try:
            query = self.service.data().ga().get(**query_map(view_id, start_date, end_date, metrics, others))
        except TypeError as error:
            # the client library rejects unknown or missing parameters here
            LOG.exception('There was an error in constructing your query : %s', error)
            raise

        for n in range(0, self.num_attempts):
            try:
                if n > 0:
                    LOG.info("query attempt %r", n + 1)
                else:
                    LOG.info("querying %s between %s and %s for %s", view_id, ymd(start_date), ymd(end_date), metrics)
                return query.execute()

            except googleapiclient.errors.HttpError as e:
                LOG.debug("HttpError ... can we recover?")

                status_code = e.resp.status
                final_attempt = n == self.num_attempts - 1

                if status_code in [403, 503] and final_attempt:
                    LOG.warning("%s on final attempt, giving up", status_code)

                elif status_code == 403:
                    seconds = backoff(n, status_code)
                    LOG.info("403 rate limited. backoff is %ss", seconds)
                    time.sleep(seconds)

                elif status_code == 503:
                    seconds = backoff(n, status_code)
                    LOG.warning("503 service unavailable. backoff is %ss", seconds)
                    time.sleep(seconds)

                else:
                    # some other sort of HttpError, re-raise
                    LOG.exception("unhandled exception querying GA")
                    raise

            except oauth2client.client.AccessTokenRefreshError:
                LOG.error('The credentials have been revoked or expired, please re-run the application to re-authorize')
                raise

        raise AssertionError("Failed to execute query after %s attempts" % self.num_attempts)

def analytics_client():
    "an `AnalyticsClient` using the authenticated service and the configured number of attempts"
    return AnalyticsClient(ga_service(), num_attempts=settings.GA_QUERY_ATTEMPTS)
