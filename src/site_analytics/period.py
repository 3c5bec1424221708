"the date range a report is run over. both ends are inclusive."

from collections import namedtuple
from datetime import timedelta
from dateutil.relativedelta import relativedelta
from .utils import ensure, todate, date_today, InvalidPeriod

class Period(namedtuple('Period', ['start_date', 'end_date'])):
    __slots__ = ()

    def __new__(cls, start_date, end_date):
        start_date, end_date = todate(start_date), todate(end_date)
        ensure(start_date <= end_date,
               "start date %s cannot be after end date %s" % (start_date, end_date), InvalidPeriod)
        return super().__new__(cls, start_date, end_date)

    @classmethod
    def create(cls, start_date, end_date):
        return cls(start_date, end_date)

    @classmethod
    def days(cls, num_days):
        "the last `num_days` days, ending today"
        ensure(isinstance(num_days, int) and num_days > 0, "number of days must be a positive integer", InvalidPeriod)
        end_date = date_today()
        return cls(end_date - timedelta(days=num_days), end_date)

    @classmethod
    def months(cls, num_months):
        ensure(isinstance(num_months, int) and num_months > 0, "number of months must be a positive integer", InvalidPeriod)
        end_date = date_today()
        return cls(end_date - relativedelta(months=num_months), end_date)

    @classmethod
    def years(cls, num_years):
        ensure(isinstance(num_years, int) and num_years > 0, "number of years must be a positive integer", InvalidPeriod)
        end_date = date_today()
        return cls(end_date - relativedelta(years=num_years), end_date)
