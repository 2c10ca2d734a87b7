from __future__ import annotations

import io

from flask import Flask, request, send_file

from ..common.datetime_utils import now_local
from ..common.web import admin_required, current_role, ok
from ..container import Container

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def register(app: Flask, container: Container) -> None:
    @app.route("/api/reports/yearly", methods=["GET"], endpoint="reports_yearly")
    @admin_required
    def reports_yearly():
        year = request.args.get("year", default=now_local().year, type=int)
        rows = container.report_service.yearly_summary(
            current_role=current_role(), year=year, user_id=request.args.get("user_id", type=int)
        )
        return ok(rows)

    @app.route("/api/reports/yearly/export", methods=["GET"], endpoint="reports_yearly_export")
    @admin_required
    def reports_yearly_export():
        year = request.args.get("year", default=now_local().year, type=int)
        fmt = (request.args.get("format") or "xlsx").lower()
        if fmt == "csv":
            data = container.report_service.export_csv(current_role=current_role(), year=year)
            return send_file(
                io.BytesIO(data),
                mimetype="text/csv",
                as_attachment=True,
                download_name=f"leave_summary_{year}.csv",
            )
        data = container.report_service.export_xlsx(current_role=current_role(), year=year)
        return send_file(
            io.BytesIO(data),
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name=f"leave_summary_{year}.xlsx",
        )
