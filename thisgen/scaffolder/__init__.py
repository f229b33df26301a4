"""thisgen scaffolder -- renders anchored project files and entity files.

Quick usage::

    from thisgen.scaffolder import TemplateRenderer
    from thisgen.writer import FileWriter

    renderer = TemplateRenderer()
    renderer.render_tree("project", "/tmp/api", {"project_name": "shop",
                         "project_pascal": "Shop"}, FileWriter())
"""

from thisgen.scaffolder.templates import TemplateRenderer

__all__ = [
    "TemplateRenderer",
]
