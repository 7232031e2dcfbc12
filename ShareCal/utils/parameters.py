# ------------ Numerical Tolerances ------------ #
SMALL_NUMBER = 1e-6
VERY_SMALL_NUMBER = 1e-8
TINY_NUMBER = 1e-10

# ------------ Defaults ------------ #
logit_exponent_default = -3
option_logit_exponent_default = -6
share_weight_default = 1.0
capacity_limit_default = 1.0
fuel_pref_elasticity_default = 0.0
efficiency_default = 1.0
share_weight_warning_threshold = 1e4
initial_fixed_share = 0.1

# ------------ Capacity Limit Transform ------------ #
cap_limit_multiplier = 1.4
cap_limit_exponent = 2
# Largest argument passed to exp() before the transformed share is taken to be the limit
max_exp_argument = 700

# ------------ Group Parameters ------------ #
share_weight = "share_weight"
logit_exponent = "logit_exponent"
option_logit_exponent = "option_logit_exponent"
fuel_pref_elasticity = "fuel_pref_elasticity"
capacity_limit = "capacity_limit"
calibration_output = "calibration_output"
scale_year = "scale_year"

# ------------ Option Parameters ------------ #
fuel = "fuel"
option_type = "option_type"
efficiency = "efficiency"
non_energy_cost = "non_energy_cost"
fixed_output = "fixed_output"
variable_cost = "variable_cost"
cal_observed_yield = "cal_observed_yield"

# ------------ Sector Parameters ------------ #
scaled_gdp_per_capita = "scaled_gdp_per_capita"

# Parameters whose values carry forward into later years when left blank
persistent_params = [share_weight, logit_exponent, option_logit_exponent, fuel_pref_elasticity,
                     capacity_limit, efficiency, non_energy_cost, variable_cost,
                     scaled_gdp_per_capita]

group_params = [share_weight, logit_exponent, option_logit_exponent, fuel_pref_elasticity,
                capacity_limit, calibration_output, scale_year]

option_params = [fuel, option_type, share_weight, efficiency, non_energy_cost, fixed_output,
                 calibration_output, variable_cost, cal_observed_yield]

sector_params = [scaled_gdp_per_capita]

# ------------ Option Types ------------ #
standard_option = "standard"
profit_option = "profit"

# ------------ Market Info ------------ #
cal_price = "calPrice"
cal_demand = "calDemand"
cal_var_cost = "calVarCost"

# Parameters whose value is given in the Context column rather than by year
context_params = [fuel, option_type, scale_year]
