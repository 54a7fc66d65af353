from rest_framework import renderers

from .export import SPREADSHEET_CONTENT_TYPE, render_spreadsheet


class SpreadsheetRenderer(renderers.BaseRenderer):
    """
    Renders sheets built by ``natea.reports.export`` for ``?format=xls``.

    Error responses are not sheets; they fall back to JSON.
    """
    media_type = SPREADSHEET_CONTENT_TYPE
    format = 'xls'
    charset = 'utf-8'

    def render(self, data, accepted_media_type=None, renderer_context=None):
        response = (renderer_context or {}).get('response')
        is_sheet = isinstance(data, dict) and 'rows' in data and 'columns' in data
        if not is_sheet or (response is not None and response.status_code >= 400):
            if response is not None:
                response['Content-Type'] = 'application/json'
            return renderers.JSONRenderer().render(data, 'application/json', renderer_context)
        return render_spreadsheet(data).encode(self.charset)
