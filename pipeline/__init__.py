# pipeline/ — analysis scripts for the NYPD shooting incident data.
#
# Run scripts in order:
#   01_build_dataset   → fetch export, clean, derive features → featured CSV
#   02_train_logistic  → seeded 70/30 split, murder-flag logistic regression
#   03_summarise       → group-by counts for the reporting layer
