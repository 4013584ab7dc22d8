"""
Fetch a Day Book export straight from a running Tally server.

Tally exposes an XML-over-HTTP interface (port 9000 by default). Posting an
export request envelope returns the same daybook XML a manual export would
write to disk, so the response bytes go through the Decoder unchanged.
"""

from datetime import date
from typing import Optional, Union
from xml.sax.saxutils import escape

import requests

from tally_daybook.errors import DaybookReadError


DateLike = Union[date, str]


class TallyClient:
    """
    Minimal client for Tally's XML export API.
    """

    REPORT_ID = "Day Book"
    # Block tag that holds one voucher in a server response
    CONTAINER_TAG = "VOUCHER"

    def __init__(self, url: str = "http://localhost:9000", company: str = "", timeout: float = 60.0):
        """
        Args:
            url: Base URL of the Tally server (e.g. http://192.168.0.189:9000)
            company: Company name as shown in Tally; empty means the active company
            timeout: Request timeout in seconds
        """
        self.url = url
        self.company = company
        self.timeout = timeout

    def build_request(self, from_date: Optional[DateLike] = None, to_date: Optional[DateLike] = None) -> str:
        """
        Build the export request envelope for the Day Book report.

        Args:
            from_date: First day to export (date or YYYYMMDD string)
            to_date: Last day to export; defaults to from_date

        Returns:
            XML request string
        """
        static_variables = ["<SVEXPORTFORMAT>$$SysName:XML</SVEXPORTFORMAT>"]
        if self.company:
            static_variables.append(f"<SVCURRENTCOMPANY>{escape(self.company)}</SVCURRENTCOMPANY>")
        if from_date is not None:
            to_date = to_date if to_date is not None else from_date
            static_variables.append(f'<SVFROMDATE TYPE="Date">{self._tally_date(from_date)}</SVFROMDATE>')
            static_variables.append(f'<SVTODATE TYPE="Date">{self._tally_date(to_date)}</SVTODATE>')
        static_variables.append("<EXPLODEFLAG>Yes</EXPLODEFLAG>")

        variables = "\n        ".join(static_variables)
        return f"""<ENVELOPE>
  <HEADER>
    <VERSION>1</VERSION>
    <TALLYREQUEST>Export</TALLYREQUEST>
    <TYPE>Data</TYPE>
    <ID>{self.REPORT_ID}</ID>
  </HEADER>
  <BODY>
    <DESC>
      <STATICVARIABLES>
        {variables}
      </STATICVARIABLES>
    </DESC>
  </BODY>
</ENVELOPE>"""

    def fetch_daybook(self, from_date: Optional[DateLike] = None, to_date: Optional[DateLike] = None) -> bytes:
        """
        Fetch the Day Book export as raw bytes.

        Raises:
            DaybookReadError: If the server cannot be reached or answers with an error
        """
        body = self.build_request(from_date, to_date)
        try:
            response = requests.post(
                self.url,
                data=body.encode("utf-8"),
                headers={"Content-Type": "text/xml; charset=utf-8"},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise DaybookReadError(self.url, str(e)) from e
        return response.content

    @staticmethod
    def _tally_date(value: DateLike) -> str:
        if isinstance(value, date):
            return value.strftime("%Y%m%d")
        return str(value).replace("-", "")
