from datetime import timedelta

from django.conf import settings

from ..domain.policy import DEFAULT_POLICY, SchedulerPolicy


def policy_from_settings() -> SchedulerPolicy:
    """Build the scheduling policy from the SCHEDULER settings dict."""
    conf = getattr(settings, "SCHEDULER", None) or {}
    if not conf:
        return DEFAULT_POLICY
    overrides = {}
    if "RELEARN_DELAY_SECONDS" in conf:
        overrides["relearn_delay"] = timedelta(seconds=int(conf["RELEARN_DELAY_SECONDS"]))
    if "MAX_INTERVAL_DAYS" in conf:
        overrides["max_interval_days"] = int(conf["MAX_INTERVAL_DAYS"])
    if "HARD_FACTOR" in conf:
        overrides["hard_factor"] = float(conf["HARD_FACTOR"])
    if "EASY_BONUS" in conf:
        overrides["easy_bonus"] = float(conf["EASY_BONUS"])
    return SchedulerPolicy(**overrides)
