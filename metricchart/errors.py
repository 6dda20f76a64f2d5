class ChartError(Exception):
  """Recoverable request problem; the renderer turns it into an error graphic."""

  kind = "error"
  message = "Error: Invalid input"

  def __init__(self, detail: str = ""):
    super().__init__(detail or self.message)
    self.detail = detail


class InvalidRequest(ChartError):
  kind = "invalid_request"
  message = "Error: Invalid input"


class NoSeries(ChartError):
  kind = "no_series"
  message = "Error: No data series"


class NoValidData(ChartError):
  kind = "no_valid_data"
  message = "Error: No valid data points"
