"""Wake-up streak package.

This package is organized by feature modules (reports, exemptions, pledges,
aggregation, ...) with a thin Flask transport layer on top of an explicit
engine/state container.
"""
