import logging
import os

import jinja2

from snulinks_smoke.models import Report, ReportOutcome

logger = logging.getLogger(__name__)
here = os.path.dirname(os.path.abspath(__file__))


class ReportExporter:
    def __init__(
        self,
        template_dir: str = os.path.join(here, "templates"),
        root_template: str = "report.html",
    ):
        self.template_dir = template_dir
        self.env = jinja2.Environment(loader=jinja2.FileSystemLoader(template_dir), autoescape=True)
        self.env.filters["relpath"] = os.path.relpath
        self.template = self.env.get_template(root_template)

    def export_json(self, report: Report, dest_directory: str, dest_filename: str = "report.json") -> str:
        if report.num_failures > 0:
            report.outcome = ReportOutcome.failure
        filename = os.path.join(dest_directory, dest_filename)
        with open(filename, "w") as f:
            f.write(report.model_dump_json(indent=4))
        logger.info(f"Report JSON saved to {filename}")
        return filename

    def export_html(self, report: Report, dest_directory: str, dest_filename: str = "index.html") -> str:
        # Screenshots stay where the evidence capture wrote them; the page links to them relatively.
        filename = os.path.join(dest_directory, dest_filename)
        stream = self.template.stream(report=report, report_dir=os.path.abspath(dest_directory))
        stream.dump(filename)
        logger.info(f"Exported report HTML to {filename}")
        return filename

    def export_all(self, report: Report, dest_directory: str):
        self.export_json(report, dest_directory=dest_directory)
        self.export_html(report, dest_directory=dest_directory)
