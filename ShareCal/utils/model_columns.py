# ------------ Sector Description Columns ------------ #
region = "Region"
branch = "Branch"
technology = "Technology"
parameter = "Parameter"
context = "Context"
unit = "Unit"

# Columns which identify a row, in the order they appear before the year columns
node_columns = [region, branch, technology, parameter, context, unit]
