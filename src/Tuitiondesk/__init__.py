"""Tuitiondesk: class schedules, attendance and monthly invoices for a tuition center."""

__version__ = "0.3.0"
