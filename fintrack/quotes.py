"""Weekly motivation rotation and savings tips.

The week number is a simple count from January 1st (Sunday-started weeks,
restarting at 1 every year), not ISO-8601 week numbering. A year can end on
week 53 and the next one starts on week 1 again; the rotation simply follows
that count.
"""

import math
import random
from datetime import date, datetime, time
from typing import Optional, Sequence, Union

from fintrack.config import QuoteSettings
from fintrack.domain import CustomQuote, WeeklyQuote

WEEKLY_MOTIVATIONS = (
    "A penny saved is a penny earned. - Benjamin Franklin",
    "It's not how much money you make, but how much money you keep. - Robert Kiyosaki",
    "The habit of saving is itself an education. - T.T. Munger",
    "Don't save what is left after spending; spend what is left after saving. - Warren Buffett",
    "Small amounts saved daily add up to huge investments over time. - Unknown",
    "Financial peace isn't the acquisition of stuff. It's learning to live on less than you make. - Dave Ramsey",
    "The real measure of your wealth is how much you'd be worth if you lost all your money. - Anonymous",
    "Money is only a tool. It will take you wherever you wish, but it will not replace you as the driver. - Ayn Rand",
    "The stock market is filled with individuals who know the price of everything, but the value of nothing. - Philip Fisher",
    "An investment in knowledge pays the best interest. - Benjamin Franklin",
    "The best time to plant a tree was 20 years ago. The second best time is now. - Chinese Proverb",
    "Do not put all your eggs in one basket. - Proverb",
    "Rich people have small TVs and big libraries, and poor people have small libraries and big TVs. - Zig Ziglar",
    "The goal isn't more money. The goal is living life on your terms. - Chris Brogan",
    "Wealth consists not in having great possessions, but in having few wants. - Epictetus",
    "Time is more valuable than money. You can get more money, but you cannot get more time. - Jim Rohn",
    "The quickest way to double your money is to fold it in half and put it in your back pocket. - Frank Hubbard",
    "Money grows on the tree of persistence. - Japanese Proverb",
    "A budget is telling your money where to go instead of wondering where it went. - Dave Ramsey",
    "The art is not in making money, but in keeping it. - Proverb",
    "Beware of little expenses. A small leak will sink a great ship. - Benjamin Franklin",
    "Money is a terrible master but an excellent servant. - P.T. Barnum",
    "The lack of money is the root of all evil. - Mark Twain",
    "Formal education will make you a living; self-education will make you a fortune. - Jim Rohn",
    "The person who doesn't know where his next dollar is coming from usually doesn't know where his last dollar went. - Unknown",
    "If you would be wealthy, think of saving as well as getting. - Benjamin Franklin",
    "Money never made a man happy yet, nor will it. The more a man has, the more he wants. - Benjamin Franklin",
    "The safe way to double your money is to fold it over once and put it in your pocket. - Frank Hubbard",
    "Wealth is not about having a lot of money; it's about having a lot of options. - Chris Rock",
    "The most important investment you can make is in yourself. - Warren Buffett",
    "Don't work for money; make money work for you. - Robert Kiyosaki",
    "The way to get started is to quit talking and begin doing. - Walt Disney",
    "Financial freedom is available to those who learn about it and work for it. - Robert Kiyosaki",
    "It's not what you earn, it's what you keep. - Unknown",
    "The first rule of compounding: Never interrupt it unnecessarily. - Charlie Munger",
    "Price is what you pay. Value is what you get. - Warren Buffett",
    "The biggest risk is not taking any risk. - Mark Zuckerberg",
    "Your net worth to the network is your net worth. - Tim O'Reilly",
    "Money is multiplied in practical value depending on the number of W's you control in your life: "
    "what you do, when you do it, where you do it, and with whom you do it. - Tim Ferriss",
    "The four most expensive words in the English language are 'This time it's different.' - Sir John Templeton",
    "Compound interest is the eighth wonder of the world. He who understands it, earns it; "
    "he who doesn't, pays it. - Albert Einstein",
    "Risk comes from not knowing what you're doing. - Warren Buffett",
    "The stock market is a device for transferring money from the impatient to the patient. - Warren Buffett",
    "Never spend your money before you have earned it. - Thomas Jefferson",
    "A wise person should have money in their head, but not in their heart. - Jonathan Swift",
    "Money is not the most important thing in the world. Love is. Fortunately, I love money. - Jackie Mason",
    "The real measure of your wealth is how much you'd be worth if you lost all your money. - Anonymous",
    "Every time you borrow money, you're robbing your future self. - Nathan W. Morris",
    "The habit of saving is itself an education; it fosters every virtue, teaches self-denial, "
    "cultivates the sense of order, trains to forethought, and so broadens the mind. - T.T. Munger",
    "Money is only a tool. It will take you wherever you wish, but it will not replace you as the driver. - Ayn Rand",
    "The secret to wealth is simple: Find a way to do more for others than anyone else does. - Tony Robbins",
    "Success is not just about what you accomplish in your life, it's about what you inspire others to do. - Unknown",
)

SAVINGS_TIPS = (
    "Try the 50/30/20 rule: 50% needs, 30% wants, 20% savings",
    "Use the envelope method for discretionary spending",
    "Automate your savings to make it effortless",
    "Review subscriptions monthly and cancel unused ones",
    "Cook at home more often to reduce food expenses",
    "Compare prices before making large purchases",
    "Set up a separate emergency fund for unexpected expenses",
    "Use cashback apps and credit cards responsibly",
    "Buy generic brands instead of name brands",
    "Plan your meals and make a grocery list",
    "Use public transportation or carpool when possible",
    "Take advantage of free entertainment options",
    "Negotiate bills like phone, internet, and insurance",
    "Buy items during sales and use coupons",
    "Consider buying used items for big purchases",
    "Track your spending to identify money leaks",
    "Set up automatic transfers to savings accounts",
    "Use the 24-hour rule before making impulse purchases",
    "Invest in energy-efficient appliances to save long-term",
    "Consider a side hustle to increase income",
)

SOURCE_SEPARATOR = " - "


def week_number(today: Union[date, datetime]) -> int:
    if not isinstance(today, datetime):
        today = datetime.combine(today, time.min)
    start_of_year = datetime(today.year, 1, 1)
    past_days = (today - start_of_year).total_seconds() / 86400
    jan1_weekday = (start_of_year.weekday() + 1) % 7   # Sunday == 0
    return math.ceil((past_days + jan1_weekday + 1) / 7)


def rotation_number(today: Union[date, datetime], frequency: str = "weekly") -> int:
    """1-based counter that advances once per rotation period."""
    if frequency == "daily":
        return today.timetuple().tm_yday
    if frequency == "monthly":
        return today.month
    return week_number(today)


def quote_pool(
    builtin: Sequence[str],
    custom: Sequence[CustomQuote],
    settings: QuoteSettings = QuoteSettings(),
) -> tuple[tuple[str, ...], int]:
    """Return (pool, number of built-in entries at the front of it)."""
    custom_texts = ()
    if settings.enable_custom_quotes:
        custom_texts = tuple(f"{q.text}{SOURCE_SEPARATOR}{q.author}" for q in custom)
    if settings.custom_quotes_only and custom_texts:
        return custom_texts, 0
    return tuple(builtin) + custom_texts, len(builtin)


def select_quote(number: int, pool: Sequence[str], builtin_count: int) -> Optional[tuple[str, bool]]:
    if not pool:
        return None
    index = (number - 1) % len(pool)
    return pool[index], index >= builtin_count


def weekly_quote(
    today: Union[date, datetime],
    builtin: Sequence[str] = WEEKLY_MOTIVATIONS,
    custom: Sequence[CustomQuote] = (),
    settings: QuoteSettings = QuoteSettings(),
) -> Optional[WeeklyQuote]:
    pool, builtin_count = quote_pool(builtin, custom, settings)
    picked = select_quote(rotation_number(today, settings.change_frequency), pool, builtin_count)
    if picked is None:
        return None
    quote, is_custom = picked
    return WeeklyQuote(quote=quote, week_number=week_number(today), is_custom=is_custom)


def split_source(quote: str) -> tuple[str, Optional[str]]:
    text, sep, author = quote.rpartition(SOURCE_SEPARATOR)
    if not sep:
        return quote, None
    return text, author


def savings_tip(rng: random.Random = random) -> str:
    return rng.choice(SAVINGS_TIPS)
