"""Templates for generated DevScore configuration files."""

DEFAULT_CONFIG = """# DevScore configuration example (repo-relative paths)
include:
  - "."
exclude:
  - ".venv"
  - "venv"
  - ".tox"
  - "build"
  - "dist"
  - "node_modules"
  - "vendor"
  - ".git"
languages:
  - "python"
  - "javascript"
  - "typescript"
  - "cpp"
  - "java"

# Languages without their own rule set are scored with all-zero static
# metrics unless routed to a family (js, python, cpp).
language_routes:
  java: "js"

# Tougher evaluator prompts with more follow-up questions
interview_mode: false

max_files: 200
parallel_workers: 0

# Exit non-zero when any DevScore falls below this value (null to disable)
fail_under:
"""

MINIMAL_CONFIG = """# DevScore minimal configuration
include:
  - "."
languages:
  - "python"
"""

CONFIG_PRESETS = {
    "full": DEFAULT_CONFIG,
    "minimal": MINIMAL_CONFIG,
}
