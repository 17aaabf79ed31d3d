"""
Error classes for PortfolioLab.

The rollup engine itself never raises on bad data: non-finite amounts and
unparseable month keys are skipped, undefined ratios come back as ``None``.
The classes below cover caller mistakes (invalid arguments) and documents
that cannot be turned into an initiative snapshot at all.
"""


class ConfigError(Exception):
    """
    Invalid configuration or argument passed to the rollup engine.

    **Common Causes:**
    - Unknown financial kind tag in a kind list
    - Fiscal-year start month outside 1-12
    - Run-rate window smaller than one month

    **Example Usage:**
        ```python
        from portfoliolab.core.errors import ConfigError
        from portfoliolab.core.summary import calculate_year_summaries

        try:
            calculate_year_summaries({"2025-01": 10.0}, fiscal_start_month=13)
        except ConfigError as e:
            print(f"Configuration error: {e}")
        ```
    """

    pass


class PortfolioLoadError(ValueError):
    """
    Raised when a portfolio document cannot be parsed or validated.

    Attributes:
        path: Location inside the document that failed (e.g. ``initiatives[2]``)
    """

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)
