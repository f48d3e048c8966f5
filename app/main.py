import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import logging
from dataclasses import replace
from datetime import timedelta

import pandas as pd
import streamlit as st

from fintrack.aggregates import (
    filter_by_window,
    goal_progress,
    goal_status,
    days_until,
    quick_stats,
    recent_transactions,
    top_categories,
    unusual_expenses,
)
from fintrack.charts import (
    expense_breakdown_frame,
    expense_figure,
    income_expense_figure,
    income_vs_expense_frame,
)
from fintrack.config import update_section
from fintrack.controller import create_controller
from fintrack.export import IMPORT_ERROR, backup, data_stats, export_data
from fintrack.filters import transaction_view
from fintrack.formatting import CURRENCY_SYMBOLS, DATE_FORMATS, format_amount, format_date, relative_date
from fintrack.functional import find_by_id
from fintrack.notifications import badge_counts
from fintrack.quotes import savings_tip, split_source
from fintrack.storage import FileStore

DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "data")

INCOME_SOURCES = ["Salary", "Freelance", "Business", "Investment", "Rental", "Gift", "Other"]
INCOME_TAGS = ["Monthly", "One-time", "Bonus", "Side-hustle", "Passive"]
EXPENSE_CATEGORIES = [
    "Food & Dining",
    "Transportation",
    "Shopping",
    "Entertainment",
    "Bills & Utilities",
    "Healthcare",
    "Education",
    "Travel",
    "Home & Garden",
    "Personal Care",
    "Gifts & Donations",
    "Other",
]
EXPENSE_TAGS = ["Essential", "Non-essential", "Recurring", "One-time", "Emergency"]
WINDOWS = {"This Week": "week", "This Month": "month", "This Year": "year", "All Time": "all"}

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("fintrack.app")

st.set_page_config(page_title="Finance Tracker", layout="wide")

if "controller" not in st.session_state:
    st.session_state.controller = create_controller(FileStore(DATA_DIR))

ctl = st.session_state.controller
state = ctl.state
config = state.config
now = ctl.clock()
summary = ctl.summary()
notifications = ctl.notifications()
badges = badge_counts(notifications)


def money(value, signed=False):
    return format_amount(value, config, signed=signed)


def tag_picker(label, options, key):
    picked = st.multiselect(label, options=options, default=[], key=f"{key}_tags")
    custom = st.text_input("Custom tags (comma separated)", key=f"{key}_custom_tags")
    extra = [t.strip() for t in custom.split(",") if t.strip()]
    return list(dict.fromkeys(picked + extra))


def show_notification(n):
    if n.severity == "high":
        st.error(n.message)
    else:
        st.info(n.message)


# ---- sidebar

st.sidebar.markdown("### 💰 Finance Tracker")
if badges.high:
    st.sidebar.error(f"🔔 {badges.high} high-priority notification(s)")

menu = st.sidebar.radio(
    "Menu",
    [
        "🏠 Dashboard",
        f"🧾 Transactions ({len(state.transactions)})",
        "📈 Add Income",
        "📉 Add Expense",
        "📊 Charts & Analytics",
        f"🎯 Goals ({badges.goals})" if badges.goals else "🎯 Goals",
        f"💡 Insights ({badges.overspending})" if badges.overspending else "💡 Insights",
        "⬇ Export Data",
        "💬 Custom Quotes",
        "⚙️ Settings",
    ],
)
section = menu.split(" ")[1]

if notifications:
    st.sidebar.markdown(f"**Notifications ({len(notifications)})**")
    for n in notifications[:3]:
        st.sidebar.caption(("🔴 " if n.severity == "high" else "🔵 ") + n.message)
    if len(notifications) > 3:
        st.sidebar.caption(f"+{len(notifications) - 3} more")

recent = recent_transactions(state.transactions)
if recent:
    st.sidebar.markdown("**Recent Transactions**")
    for t in recent:
        label = t.source or t.category or "Transaction"
        sign = 1 if t.type == "income" else -1
        st.sidebar.caption(f"{label} · {relative_date(t.date, now, config)} · {money(sign * t.amount, signed=True)}")

if config.show_quick_stats:
    st.sidebar.markdown("---")
    st.sidebar.caption(f"Balance: {money(summary.current_balance)}")
    st.sidebar.caption(f"Income: {money(summary.total_income)}")
    st.sidebar.caption(f"Expenses: {money(summary.total_expenses)}")


# ---- pages

if section == "Dashboard":
    st.title("🏠 Dashboard")
    k1, k2, k3, k4 = st.columns(4)
    with k1:
        st.metric("Total Income", money(summary.total_income))
    with k2:
        st.metric("Total Expenses", money(summary.total_expenses))
    with k3:
        st.metric("Current Balance", money(summary.current_balance))
    with k4:
        st.metric("Status", "Overspending" if summary.is_overspending else "On Track")

    for n in notifications[:3]:
        show_notification(n)

    st.subheader("Spending Overview")
    shares = top_categories(summary.expenses_by_category, 3)
    if shares:
        for share in shares:
            st.write(f"**{share.category}** · {money(share.amount)}")
            st.progress(min(1.0, share.percentage / 100))
    else:
        st.info("No expenses recorded yet.")

elif section == "Transactions":
    st.title("🧾 Transactions")
    c1, c2, c3, c4 = st.columns([3, 1, 1, 1])
    with c1:
        search = st.text_input("Search", placeholder="Source, category, description or tag")
    with c2:
        t_type = st.selectbox("Type", ["all", "income", "expense"])
    with c3:
        sort_by = st.selectbox("Sort by", ["date", "amount", "type"])
    with c4:
        order = st.selectbox("Order", ["desc", "asc"])

    view = transaction_view(state.transactions, search, t_type, sort_by, order)
    v_income = sum(t.amount for t in view if t.type == "income")
    v_expenses = sum(t.amount for t in view if t.type == "expense")
    m1, m2, m3 = st.columns(3)
    m1.metric("Shown", len(view))
    m2.metric("Income", money(v_income))
    m3.metric("Expenses", money(v_expenses))

    if view:
        df = pd.DataFrame([
            {
                "Date": format_date(t.date, config),
                "Type": t.type,
                "Source / Category": t.source or t.category or "",
                "Description": (t.description or "") if config.transactions.show_descriptions else "",
                "Tags": ", ".join(t.tags),
                "Amount": money(t.amount if t.type == "income" else -t.amount, signed=True),
                "id": t.id,
            }
            for t in view
        ])
        st.dataframe(df.drop(columns=["id"]), use_container_width=True)

        st.subheader("✏️ Edit or delete")
        labels = {f"{format_date(t.date, config)} · {t.source or t.category} · {money(t.amount)} ({t.id})": t.id for t in view}
        chosen = st.selectbox("Transaction", list(labels.keys()))
        current = find_by_id(state.transactions, labels[chosen]).get_or_else(None)
        if current is not None:
            with st.form("edit_transaction"):
                e_amount = st.number_input("Amount", min_value=0.0, value=float(current.amount), step=1.0)
                e_date = st.date_input("Date", value=pd.to_datetime(current.date).date())
                e_label = st.text_input("Source" if current.type == "income" else "Category",
                                        value=current.source or current.category or "")
                e_desc = st.text_input("Description", value=current.description or "")
                e_tags = st.text_input("Tags (comma separated)", value=", ".join(current.tags))
                save, delete = st.columns(2)
                saved = save.form_submit_button("Save")
                deleted = delete.form_submit_button("Delete")
            if saved:
                ctl.update_transaction(replace(
                    current,
                    amount=e_amount,
                    date=e_date.isoformat(),
                    source=(e_label or None) if current.type == "income" else current.source,
                    category=(e_label or None) if current.type == "expense" else current.category,
                    description=e_desc or None,
                    tags=tuple(t.strip() for t in e_tags.split(",") if t.strip()),
                ))
                st.rerun()
            if deleted:
                ctl.delete_transaction(current.id)
                st.rerun()
    else:
        st.info("No transactions match the current filters.")

elif section == "Add":
    is_income = "Income" in menu
    st.title("📈 Add Income" if is_income else "📉 Add Expense")
    key = "income" if is_income else "expense"
    with st.form(f"add_{key}", clear_on_submit=True):
        if is_income:
            label = st.selectbox("Source", INCOME_SOURCES)
        else:
            options = list(dict.fromkeys(list(config.transactions.default_categories) + EXPENSE_CATEGORIES))
            label = st.selectbox("Category", options)
            description = st.text_area("Description", placeholder="What did you spend on?")
        amount = st.number_input("Amount", min_value=0.0, step=0.01, format="%.2f")
        t_date = st.date_input("Date", value=now.date())
        tags = tag_picker("Tags", INCOME_TAGS if is_income else EXPENSE_TAGS, key)
        submitted = st.form_submit_button("Add Income" if is_income else "Add Expense")

    if submitted:
        before = len(ctl.state.transactions)
        ctl.add_transaction(
            key,
            amount,
            t_date.isoformat(),
            source=label if is_income else None,
            category=None if is_income else label,
            description=None if is_income else description,
            tags=tags,
        )
        if len(ctl.state.transactions) > before:
            st.success(f"✅ {key.title()} of {money(amount)} added!")
        else:
            st.warning("Please enter an amount greater than zero.")

elif section == "Charts":
    st.title("📊 Charts & Analytics")
    col_left, col_right = st.columns(2)
    with col_left:
        window_label = st.selectbox("Expense period", list(WINDOWS.keys()), index=3)
        kind = st.radio("Chart type", ["pie", "bar"], horizontal=True)
        frame = expense_breakdown_frame(state.transactions, WINDOWS[window_label], now)
        if frame.empty:
            st.info("No expense data available for the selected period")
        else:
            st.caption(f"Highest: {frame.iloc[0]['category']} ({money(frame.iloc[0]['amount'])})")
            st.plotly_chart(expense_figure(frame, kind), use_container_width=True)
    with col_right:
        periods = ["week", "month", "year"]
        default_period = config.default_chart_period if config.default_chart_period in periods else "month"
        period = st.selectbox("Income vs expenses by", periods, index=periods.index(default_period))
        series = income_vs_expense_frame(state.transactions, period, now)
        net_total = series["net"].sum()
        st.caption(f"Deficit: {money(abs(net_total))}" if net_total < 0 else f"Surplus: {money(net_total)}")
        st.plotly_chart(income_expense_figure(series), use_container_width=True)

elif section == "Goals":
    st.title("🎯 Goals")
    st.caption(f"Available balance: {money(summary.current_balance)}")
    with st.expander("➕ Add Goal"):
        with st.form("add_goal", clear_on_submit=True):
            title = st.text_input("Goal Title", placeholder="e.g., Emergency Fund, Vacation, New Car")
            target = st.number_input("Target Amount", min_value=0.0, step=1.0)
            deadline = st.date_input(
                "Deadline", value=now.date() + timedelta(days=config.goals.default_deadline_days)
            )
            if st.form_submit_button("Add Goal"):
                ctl.add_goal(title, target, deadline.isoformat())
                st.rerun()

    if not state.goals:
        st.info("No goals yet. Set one to start tracking your progress.")
    for goal in state.goals:
        progress = goal_progress(goal)
        st.subheader(goal.title)
        st.write(f"{money(goal.current_amount)} / {money(goal.target_amount)} · **{goal_status(goal, now)}**")
        st.progress(min(1.0, max(0.0, progress / 100)))
        if config.goals.show_progress_percentage:
            st.caption(f"{progress:.1f}% complete")
        try:
            days = days_until(goal.deadline, now)
            st.caption(f"{days} days remaining" if days >= 0 else f"{-days} days overdue")
        except ValueError:
            st.caption(f"Deadline: {goal.deadline}")
        with st.form(f"update_goal_{goal.id}", clear_on_submit=True):
            new_amount = st.number_input("Current amount saved", min_value=0.0, value=float(goal.current_amount))
            if st.form_submit_button("Update Progress"):
                ctl.update_goal(goal.id, new_amount)
                st.rerun()

elif section == "Insights":
    st.title("💡 Insights")
    if summary.is_overspending:
        st.error(
            "**Action Required:** Your expenses exceed your income. Consider reducing spending in your "
            "top expense categories or finding ways to increase your income."
        )

    col_a, col_b = st.columns(2)
    with col_a:
        st.subheader("Top Categories to Review")
        shares = top_categories(summary.expenses_by_category, 3)
        if shares:
            for i, share in enumerate(shares):
                st.write(f"#{i + 1} **{share.category}** · {money(share.amount)} ({share.percentage:.1f}%)")
                if i == 0:
                    st.caption("Highest spending. Consider reducing this category by 10-20% to improve your budget")
        else:
            st.info("No expense data yet.")
    with col_b:
        st.subheader("Unusual Expenses")
        unusual = unusual_expenses(state.transactions, now)
        if unusual:
            for t in unusual:
                st.write(f"**{t.category or 'Other'}** · {money(t.amount)} · {format_date(t.date, config)}")
                if t.description:
                    st.caption(t.description)
        else:
            st.info("No unusual expenses in the last 30 days.")

    st.subheader("Weekly Motivation")
    quote = ctl.weekly_quote()
    if quote is None:
        st.info("No quotes available.")
    else:
        text, author = split_source(quote.quote)
        shown = quote.quote if config.quotes.show_quote_source or author is None else text
        st.markdown(f"> “{shown}”")
        st.caption(f"Week {quote.week_number} of {now.year}" + (" · Custom" if quote.is_custom else ""))

    st.subheader("Savings Tip")
    st.info(savings_tip())

    stats = quick_stats(state.transactions, now)
    s1, s2, s3 = st.columns(3)
    s1.metric("Expense categories", stats.expense_categories)
    s2.metric("Income entries", stats.income_count)
    s3.metric("Transactions (30 days)", stats.last_30_days_count)

elif section == "Export":
    st.title("⬇ Export Data")
    c1, c2, c3 = st.columns(3)
    with c1:
        data_type = st.selectbox("Data", ["transactions", "goals", "summary"])
    with c2:
        formats = ["csv", "json"]
        fmt = st.selectbox("Format", formats, index=formats.index(config.data.export_format)
                           if config.data.export_format in formats else 0)
    with c3:
        window_label = st.selectbox("Date range", list(WINDOWS.keys()), index=3)
    window = WINDOWS[window_label]

    if data_type == "transactions":
        st.caption(f"{len(filter_by_window(state.transactions, window, now))} records")
    elif data_type == "goals":
        st.caption(f"{len(state.goals)} records")

    exported = export_data(state, data_type, fmt, window, now)
    if exported is None:
        st.info("No data to export for the selected criteria.")
    else:
        st.download_button(f"⬇ Download {exported.filename}", exported.content,
                           file_name=exported.filename, mime=exported.mime)

elif section == "Custom":
    st.title("💬 Custom Quotes")
    with st.form("add_quote", clear_on_submit=True):
        q_text = st.text_area("Quote Text *", placeholder="Enter your motivational quote...")
        q_author = st.text_input("Author (Optional)", placeholder="Quote author or source")
        if st.form_submit_button("Add Quote"):
            ctl.add_custom_quote(q_text, q_author)
            st.rerun()

    if not state.custom_quotes:
        st.info("Add your own motivational quotes to personalize your weekly inspiration.")
    else:
        st.caption(f"Custom quotes are mixed with default quotes in the weekly rotation. "
                   f"You have {len(state.custom_quotes)} custom quote(s).")
    for q in state.custom_quotes:
        with st.expander(f"“{q.text[:60]}” · {q.author}"):
            st.caption(f"Added {format_date(q.date_added, config)}")
            with st.form(f"edit_quote_{q.id}"):
                new_text = st.text_area("Text", value=q.text)
                new_author = st.text_input("Author", value=q.author)
                save, delete = st.columns(2)
                if save.form_submit_button("Save"):
                    ctl.update_custom_quote(q.id, new_text, new_author)
                    st.rerun()
                if delete.form_submit_button("Delete"):
                    ctl.delete_custom_quote(q.id)
                    st.rerun()

elif section == "Settings":
    st.title("⚙️ Settings")
    general, notify, quotes_tab, data_tab = st.tabs(["General", "Notifications", "Quotes", "Data"])

    with general:
        with st.form("general_settings"):
            currencies = list(CURRENCY_SYMBOLS.keys())
            date_formats = list(DATE_FORMATS.keys())
            currency = st.selectbox("Currency", currencies, index=currencies.index(config.currency)
                                    if config.currency in currencies else 0)
            date_format = st.selectbox("Date format", date_formats, index=date_formats.index(config.date_format)
                                       if config.date_format in date_formats else 0)
            decimals = st.selectbox("Decimal places", [0, 2, 3], index=[0, 2, 3].index(config.number_format.decimal_places)
                                    if config.number_format.decimal_places in (0, 2, 3) else 1)
            quick = st.checkbox("Show quick stats", value=config.show_quick_stats)
            if st.form_submit_button("Save"):
                new = replace(config, currency=currency, date_format=date_format, show_quick_stats=quick)
                ctl.update_config(update_section(new, "number_format", decimal_places=decimals))
                st.rerun()

    with notify:
        with st.form("notification_settings"):
            ns = config.notifications
            enabled = st.checkbox("Enable notifications", value=ns.enabled)
            overspending = st.checkbox("Overspending alerts", value=ns.overspending_alerts)
            deadlines = st.checkbox("Goal deadline reminders", value=ns.goal_deadline_reminders)
            achievements = st.checkbox("Goal achievements", value=ns.goal_achievements)
            reminder_days = st.selectbox("Remind me before deadline (days)", [1, 3, 7, 14, 30],
                                         index=[1, 3, 7, 14, 30].index(ns.reminder_days)
                                         if ns.reminder_days in (1, 3, 7, 14, 30) else 2)
            if st.form_submit_button("Save"):
                ctl.update_config(update_section(
                    config, "notifications",
                    enabled=enabled,
                    overspending_alerts=overspending,
                    goal_deadline_reminders=deadlines,
                    goal_achievements=achievements,
                    reminder_days=reminder_days,
                ))
                st.rerun()

    with quotes_tab:
        with st.form("quote_settings"):
            qs = config.quotes
            enable_custom = st.checkbox("Include custom quotes", value=qs.enable_custom_quotes)
            custom_only = st.checkbox("Custom quotes only", value=qs.custom_quotes_only)
            show_source = st.checkbox("Show quote source", value=qs.show_quote_source)
            frequencies = ["daily", "weekly", "monthly"]
            frequency = st.selectbox("Change quote", frequencies, index=frequencies.index(qs.change_frequency)
                                     if qs.change_frequency in frequencies else 1)
            if st.form_submit_button("Save"):
                ctl.update_config(update_section(
                    config, "quotes",
                    enable_custom_quotes=enable_custom,
                    custom_quotes_only=custom_only,
                    show_quote_source=show_source,
                    change_frequency=frequency,
                ))
                st.rerun()

    with data_tab:
        stats = data_stats(state)
        d1, d2, d3, d4 = st.columns(4)
        d1.metric("Transactions", stats.transactions)
        d2.metric("Goals", stats.goals)
        d3.metric("Custom quotes", stats.custom_quotes)
        d4.metric("Data size", f"{stats.size_kb} KB")

        retention_options = [0, 365, 730, 1095]
        retention = st.selectbox(
            "Data retention (days, 0 = keep forever)", retention_options,
            index=retention_options.index(config.data.data_retention_days)
            if config.data.data_retention_days in retention_options else 0,
        )
        if retention != config.data.data_retention_days:
            ctl.update_config(update_section(config, "data", data_retention_days=retention))
            ctl.apply_retention()
            st.rerun()

        snapshot = backup(state, now)
        st.download_button("⬇ Download backup", snapshot.content, file_name=snapshot.filename, mime=snapshot.mime)

        uploaded = st.file_uploader("Import backup", type=["json"])
        if uploaded is not None and st.button("Import"):
            result = ctl.import_data(uploaded.getvalue().decode("utf-8", errors="replace"))
            if result.is_right():
                st.success("Data imported successfully!")
            else:
                st.error(IMPORT_ERROR)

        if st.button("↩ Reset settings to defaults"):
            ctl.reset_config()
            st.rerun()

        st.markdown("---")
        confirm = st.checkbox("I understand this permanently deletes all my data")
        if st.button("🗑 Clear all data", disabled=not confirm):
            logger.info("Clearing all data from settings")
            ctl.clear_data()
            st.success("All data cleared successfully!")
            st.rerun()
