"""Human-readable metric definitions for the app."""

METRIC_GUIDE = [
    {
        "Metric": "Balance",
        "Meaning": "All-time income minus all-time expenses.",
        "Formula": "sum(income) - sum(expenses)",
    },
    {
        "Metric": "Today / week / month",
        "Meaning": "Expenses dated today, in the last 7 days, and since the first of this month.",
        "Formula": "sum(expenses in window)",
    },
    {
        "Metric": "Budget used",
        "Meaning": "Share of a category's monthly cap already spent this month, capped at 100%.",
        "Formula": "min(spent / budget * 100, 100)",
    },
    {
        "Metric": "Budget status",
        "Meaning": "On track below 70%, watch from 70%, almost over from 90%, over budget at 100%.",
        "Formula": "thresholds on Budget used",
    },
    {
        "Metric": "Z-score",
        "Meaning": "How many standard deviations an expense sits above its category average.",
        "Formula": "(amount - mean) / std dev (population)",
    },
    {
        "Metric": "Anomaly",
        "Meaning": "Expense whose Z-score exceeds the threshold; categories need at least 3 expenses.",
        "Formula": "Z-score > threshold",
    },
    {
        "Metric": "Avg daily spending",
        "Meaning": "Spending spread across every day from first to last expense, zero days included.",
        "Formula": "total spending / calendar days",
    },
    {
        "Metric": "SMA forecast",
        "Meaning": "Flat prediction of each upcoming day using the mean of the last N days.",
        "Formula": "mean(last N daily amounts)",
    },
    {
        "Metric": "Coefficient of variation",
        "Meaning": "Spread of the forecast window relative to its mean; drives forecast confidence.",
        "Formula": "std dev / mean * 100",
    },
    {
        "Metric": "Forecast confidence",
        "Meaning": "High at CV up to 30%, medium up to 50%, low above 50%.",
        "Formula": "thresholds on CV",
    },
    {
        "Metric": "Runway",
        "Meaning": "Days until the balance is used up at the recent average daily spend.",
        "Formula": "floor(balance / avg daily spend)",
    },
    {
        "Metric": "Burn rate",
        "Meaning": "Share of the balance spent per day at the recent pace.",
        "Formula": "avg daily spend / balance * 100",
    },
    {
        "Metric": "Weekday average",
        "Meaning": "Average expense size for transactions falling on each weekday.",
        "Formula": "weekday total / weekday count",
    },
    {
        "Metric": "Goal progress",
        "Meaning": "Share of the savings target already saved, capped at 100%.",
        "Formula": "min(saved / target * 100, 100)",
    },
]
