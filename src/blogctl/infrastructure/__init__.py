"""Infrastructure layer — filesystem, Markdown, templates, and the Site."""
