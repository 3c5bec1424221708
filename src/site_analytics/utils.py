from datetime import datetime, date

def ensure(assertion, msg, exception_class=AssertionError):
    """intended as a convenient replacement for `assert` statements that
    get compiled away with -O flags"""
    if not assertion:
        raise exception_class(msg)

lmap = lambda func, *iterable: list(map(func, *iterable))

class InvalidPeriod(ValueError):
    pass

class InvalidConfiguration(ValueError):
    pass

def norm_view_id(view_id):
    "returns the given `view_id` prefixed with 'ga:', as the reporting api expects"
    ensure(view_id, "a view id is required", InvalidConfiguration)
    if str(view_id).startswith('ga:'):
        return view_id
    return "ga:%s" % str(int(view_id))

def ymd(dt):
    "returns a yyyy-mm-dd version of the given date or datetime object"
    if isinstance(dt, str):
        return dt
    return dt.strftime("%Y-%m-%d")

def parse_ymd(string):
    "parses the compact yyyymmdd dates GA returns for the `ga:date` dimension"
    return datetime.strptime(string, "%Y%m%d").date()

def todate(d):
    "returns the `date` part of a `datetime`, or the given `date` as-is"
    if isinstance(d, datetime):
        return d.date()
    ensure(isinstance(d, date), "expecting a date or datetime object, not %r" % (type(d),), InvalidPeriod)
    return d

def date_today():
    return date.today()
