"""Static guided flows, one per intent category."""

from __future__ import annotations

from finflow.schemas import FlowStep, IntentCategory, IntentFlow


def _first(calculator_id: str, title: str, description: str, why: str) -> FlowStep:
    return FlowStep(
        calculator_id=calculator_id,
        title=title,
        description=description,
        why_this_matters=why,
        prefill_from=("extracted",),
    )


def _then(calculator_id: str, title: str, description: str, why: str) -> FlowStep:
    return FlowStep(
        calculator_id=calculator_id,
        title=title,
        description=description,
        why_this_matters=why,
        prefill_from=("extracted", "previous"),
    )


INTENT_FLOWS: dict[IntentCategory, IntentFlow] = {
    IntentCategory.RETIREMENT: IntentFlow(
        category=IntentCategory.RETIREMENT,
        name="Retirement Planning",
        description="Figure out when and how you can retire comfortably",
        steps=(
            _first(
                "fire-number",
                "Your FIRE Number",
                "Calculate how much you need to retire",
                "This is your target - the amount that will fund your retirement lifestyle.",
            ),
            _then(
                "coast-fire",
                "Coast FIRE Check",
                "See if you can stop saving and still retire on time",
                "You might be closer than you think. Coast FIRE means your money will "
                "grow to your goal without additional savings.",
            ),
            _then(
                "fire-date",
                "Your FIRE Date",
                "Calculate exactly when you can retire",
                "Put a date on the calendar. This makes it real and trackable.",
            ),
        ),
    ),
    IntentCategory.FIRE: IntentFlow(
        category=IntentCategory.FIRE,
        name="Financial Independence",
        description="Achieve financial independence and retire early",
        steps=(
            _first(
                "fire-number",
                "Your FIRE Number",
                "The magic number for financial independence",
                "This is your freedom number - when you hit it, work becomes optional.",
            ),
            _then(
                "savings-rate",
                "Savings Rate Impact",
                "See how your savings rate affects your timeline",
                "Your savings rate is the single biggest factor in how fast you reach FIRE.",
            ),
            _then(
                "coast-fire",
                "Coast FIRE Milestone",
                "When can you downshift and coast?",
                "Coast FIRE is a powerful milestone - it means you could work less "
                "stressful jobs and still retire on time.",
            ),
        ),
    ),
    IntentCategory.HOME_BUYING: IntentFlow(
        category=IntentCategory.HOME_BUYING,
        name="Home Buying",
        description="Figure out what you can afford and how to get there",
        steps=(
            _first(
                "home-affordability",
                "What Can You Afford?",
                "Calculate your home buying budget",
                "Know your range before you start looking to avoid disappointment.",
            ),
            _then(
                "down-payment",
                "Down Payment Plan",
                "How long to save for your down payment",
                "A solid down payment means better rates and lower monthly payments.",
            ),
            _then(
                "mortgage-payment",
                "Monthly Payment",
                "What will your mortgage cost monthly",
                "Make sure the monthly payment fits comfortably in your budget.",
            ),
        ),
    ),
    IntentCategory.CAREER_CHANGE: IntentFlow(
        category=IntentCategory.CAREER_CHANGE,
        name="Career Transition",
        description="Plan a career change with financial confidence",
        steps=(
            _first(
                "runway-calculator",
                "Your Runway",
                "How long can you go without income",
                "Knowing your runway gives you the confidence to make a move.",
            ),
            _then(
                "career-switch",
                "Career Switch Analysis",
                "Compare your current path vs. a new career",
                "Sometimes a short-term pay cut leads to long-term gains.",
            ),
            _then(
                "coast-fire",
                "Financial Flexibility",
                "See if you have FIRE flexibility for the change",
                "You might have more freedom than you realize to take risks.",
            ),
        ),
    ),
    IntentCategory.DEBT_FREEDOM: IntentFlow(
        category=IntentCategory.DEBT_FREEDOM,
        name="Debt Freedom",
        description="Create a plan to become debt-free",
        steps=(
            _first(
                "debt-payoff",
                "Debt Payoff Plan",
                "See when you can be debt-free",
                "A clear payoff date keeps you motivated.",
            ),
            _then(
                "debt-avalanche",
                "Optimal Strategy",
                "Avalanche vs. snowball approach",
                "The right strategy can save you thousands in interest.",
            ),
            _then(
                "fire-number",
                "Life After Debt",
                "See your FIRE potential after debt",
                "Visualize where you can be once the debt is gone.",
            ),
        ),
    ),
    IntentCategory.EDUCATION: IntentFlow(
        category=IntentCategory.EDUCATION,
        name="Education Planning",
        description="Plan for education costs",
        steps=(
            _first(
                "education-cost",
                "True Cost",
                "Calculate the full cost of education",
                "Know the real number including living expenses and opportunity cost.",
            ),
            _then(
                "student-loan",
                "Loan Impact",
                "Understand your loan repayment",
                "See how loans will affect your finances for years to come.",
            ),
            _then(
                "roi-education",
                "Education ROI",
                "Is the investment worth it?",
                "Make sure the degree pays off financially.",
            ),
        ),
    ),
    IntentCategory.INVESTMENT: IntentFlow(
        category=IntentCategory.INVESTMENT,
        name="Investment Growth",
        description="Understand and plan your investment growth",
        steps=(
            _first(
                "compound-growth",
                "Compound Growth",
                "See the power of compound interest",
                "Time in the market beats timing the market.",
            ),
            _then(
                "investment-goal",
                "Goal Planning",
                "How much to invest to hit your target",
                "Turn your goal into a concrete monthly action.",
            ),
            _then(
                "fire-number",
                "FIRE Potential",
                "What this means for financial independence",
                "Connect your investments to the bigger picture.",
            ),
        ),
    ),
    IntentCategory.EMERGENCY_FUND: IntentFlow(
        category=IntentCategory.EMERGENCY_FUND,
        name="Emergency Fund",
        description="Build your financial safety net",
        steps=(
            _first(
                "emergency-fund",
                "How Much You Need",
                "Calculate your emergency fund target",
                "The right amount depends on your situation and risk tolerance.",
            ),
            _then(
                "savings-timeline",
                "Savings Plan",
                "How long to build your fund",
                "A timeline makes the goal achievable.",
            ),
            _then(
                "fire-number",
                "Beyond Emergency",
                "Next steps after your fund is built",
                "Once you have security, you can focus on growth.",
            ),
        ),
    ),
    IntentCategory.GENERAL_FINANCIAL: IntentFlow(
        category=IntentCategory.GENERAL_FINANCIAL,
        name="Financial Health Check",
        description="Get a complete picture of your financial situation",
        steps=(
            _first(
                "fire-number",
                "FIRE Number",
                "Your financial independence target",
                "Everyone should know their FIRE number, even if early retirement "
                "isn't the goal.",
            ),
            _then(
                "savings-rate",
                "Savings Rate",
                "How much of your income you're keeping",
                "This single metric predicts your financial future better than income.",
            ),
            _then(
                "net-worth",
                "Net Worth",
                "Your complete financial picture",
                "Track this number over time to see real progress.",
            ),
        ),
    ),
}


def get_flow_for_intent(category: IntentCategory | str) -> IntentFlow:
    """Return the guided flow for a category. Every category has one."""
    return INTENT_FLOWS[IntentCategory(category)]


__all__ = ["INTENT_FLOWS", "get_flow_for_intent"]
