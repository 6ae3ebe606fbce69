from pathlib import Path
from typing import Any, Dict, List, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..common.clock import fmt_time

STAGE_LABELS = {
    'EMPTY': '空地',
    'SEED': '种子',
    'SPROUT': '发芽',
    'GROWING': '生长中',
    'RIPE': '成熟',
    'WITHER': '枯萎',
    'ERROR': '数据错误',
}


class FarmRenderer:
    def __init__(self, template_dir: Optional[Path] = None):
        # __file__ is .../farmstead/farm/render.py -> parents[1] is package root
        self.template_dir = Path(template_dir) if template_dir else \
            Path(__file__).resolve().parents[1] / "resources" / "farm"
        self._env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape(['html']),
        )
        self._env.filters['fmt_time'] = fmt_time

    def render_template(self, template_name: str, **context) -> str:
        tpl = self._env.get_template(template_name)
        return tpl.render(**context)

    def render_status(self, status: Dict[str, Any], labels: Optional[Dict[str, str]] = None) -> str:
        """渲染农场面板，labels 由调用方按语言传入"""
        return self.render_template(
            "farm_status.html",
            farm=status,
            plots=status.get('plots', []),
            labels=labels or STAGE_LABELS,
        )

    def render_plots(self, plots: List[Dict[str, Any]], labels: Optional[Dict[str, str]] = None) -> str:
        return self.render_template("farm_plots.html", plots=plots, labels=labels or STAGE_LABELS)
