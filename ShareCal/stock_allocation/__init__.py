from .capacity_limits import (
    cap_limit_transform,
    limit_shares,
    apply_capacity_limits
)

from .fixed_output import (
    get_group_fixed_output,
    get_total_fixed_output,
    all_output_fixed,
    sector_all_output_fixed,
    tabulate_fixed_output,
    set_share_to_fixed_value,
    seed_fixed_share,
    adj_shares,
    adjust_for_fixed_output
)
