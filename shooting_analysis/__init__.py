"""
Shooting incident analysis — shared Python package.

Contains the core logic for the NYPD shooting incident pipeline:
  - shooting_analysis.data.source         — CSV export fetch / local read
  - shooting_analysis.data.cleaning       — completeness filter and schema normalizer
  - shooting_analysis.data.categories     — open label set -> stable integer codes
  - shooting_analysis.features.engineering — year/month/day and time-of-day buckets
  - shooting_analysis.model.split         — seeded train/holdout split
  - shooting_analysis.model.classifier    — murder-flag logistic regression
  - shooting_analysis.reporting.aggregate — group-by counts for reporting
  - shooting_analysis.pipeline            — stage orchestration
  - shooting_analysis.errors              — error taxonomy and row error tally
  - shooting_analysis.config              — YAML config loading
  - shooting_analysis.logging_utils       — project-wide logger factory
"""
