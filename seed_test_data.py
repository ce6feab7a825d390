"""
Seed demo data for account_id=1 (run create_test_user.py first).
Run:  python seed_test_data.py
"""
import sys
from datetime import timedelta

# ── bootstrap ────────────────────────────────────────────────────
from app.config import get_settings
from app.infrastructure.db.session import get_session_factory
from app.infrastructure.db.models import User, TransactionModel

db = get_session_factory()()
ACCOUNT_ID = 1

user = db.get(User, ACCOUNT_ID)
if not user:
    print("User id=1 not found"); sys.exit(1)

if db.query(TransactionModel).filter_by(account_id=ACCOUNT_ID).count() > 0:
    print("Demo data already exists. Skipping.")
    sys.exit(0)

# ── use cases ────────────────────────────────────────────────────
from app.application.finances import CreateTransactionUseCase, CreateFinancialGoalUseCase
from app.application.habits import CreateHabitUseCase, SetHabitLogUseCase
from app.application.objectives import CreateObjectiveUseCase, CreateKeyResultUseCase
from app.application.projects import CreateProjectUseCase, CreateTaskUseCase
from app.application.library import CreateLibraryItemUseCase
from app.application.contacts import CreateContactUseCase

today = get_settings().local_today()
month_start = today.replace(day=1)

# ═══════════════════════════════════════════════════════════════
# Finances
# ═══════════════════════════════════════════════════════════════
print("Creating transactions...")
tx_uc = CreateTransactionUseCase(db)
tx_count = 0
for offset, amount, type_, category, note in (
    (0, "3200", "income", "salary", "Monthly salary"),
    (1, "450", "income", "freelance", "Landing page"),
    (0, "1100", "expense", "housing", "Rent"),
    (2, "240.50", "expense", "food", "Groceries"),
    (3, "65", "expense", "transport", "Metro card"),
    (4, "120", "expense", "food", "Dinner out"),
    (5, "39.99", "expense", "subscriptions", "Streaming + VPN"),
    (6, "80", "expense", "health", "Pharmacy"),
):
    day = min(month_start + timedelta(days=offset), today)
    tx_uc.execute(ACCOUNT_ID, day, amount, type_, category, note=note); tx_count += 1
print(f"  {tx_count} transactions created")

goal_uc = CreateFinancialGoalUseCase(db)
goal_uc.execute(ACCOUNT_ID, "Emergency fund", "10000", progress_percentage=35)
goal_uc.execute(ACCOUNT_ID, "New laptop", "2000", target_date=today + timedelta(days=120), progress_percentage=10)
print("  2 financial goals created")

# ═══════════════════════════════════════════════════════════════
# Habits
# ═══════════════════════════════════════════════════════════════
print("Creating habits...")
habit_uc = CreateHabitUseCase(db)
h_run = habit_uc.execute(ACCOUNT_ID, "Morning run", "health")
h_read = habit_uc.execute(ACCOUNT_ID, "Read", "learning", metric_type="minutes")
h_words = habit_uc.execute(ACCOUNT_ID, "Spanish words", "language", metric_type="count")
habit_uc.execute(ACCOUNT_ID, "Inbox zero", "productivity")

log_uc = SetHabitLogUseCase(db)
for back in range(7):
    day = today - timedelta(days=back)
    log_uc.execute(ACCOUNT_ID, h_run, day, completed=back % 3 != 2)
    log_uc.execute(ACCOUNT_ID, h_read, day, value=20 + back * 5, energy_level=7)
log_uc.execute(ACCOUNT_ID, h_words, today, value=15)
print("  4 habits, 15 logs created")

# ═══════════════════════════════════════════════════════════════
# Objectives
# ═══════════════════════════════════════════════════════════════
print("Creating objectives...")
obj_uc = CreateObjectiveUseCase(db)
kr_uc = CreateKeyResultUseCase(db)
o_health = obj_uc.execute(ACCOUNT_ID, "Get fit", "personal", f"Q{(today.month - 1) // 3 + 1} {today.year}", status="on_track")
kr_uc.execute(ACCOUNT_ID, o_health, "Run 100 km", "km", target=100, current_value=42)
kr_uc.execute(ACCOUNT_ID, o_health, "Weight down to 75", "kg", baseline=82, target=75, current_value=79)
o_career = obj_uc.execute(ACCOUNT_ID, "Ship the side project", "professional", str(today.year), priority="high", status="at_risk")
kr_uc.execute(ACCOUNT_ID, o_career, "Paying users", "users", target=50, current_value=4)
print("  2 objectives, 3 key results created")

# ═══════════════════════════════════════════════════════════════
# Projects & tasks
# ═══════════════════════════════════════════════════════════════
print("Creating projects...")
prj_uc = CreateProjectUseCase(db)
task_uc = CreateTaskUseCase(db)
p_site = prj_uc.execute(
    ACCOUNT_ID, "Portfolio site", "professional", status="in_progress", type="work",
    start_date=today - timedelta(days=14), deadline=today + timedelta(days=30),
    stakeholders="me, mentor",
)
prj_uc.execute(
    ACCOUNT_ID, "Kitchen renovation", "personal", type="personal",
    start_date=today + timedelta(days=20), deadline=today + timedelta(days=75),
)
for title, status in (("Wireframes", "done"), ("Copywriting", "in_progress"), ("Deploy", "todo")):
    task_uc.execute(ACCOUNT_ID, title, project_id=p_site, status=status, tags="web")
task_uc.execute(ACCOUNT_ID, "Renew passport", priority="high")
print("  2 projects, 4 tasks created")

# ═══════════════════════════════════════════════════════════════
# Library & contacts
# ═══════════════════════════════════════════════════════════════
print("Creating library items and contacts...")
lib_uc = CreateLibraryItemUseCase(db)
lib_uc.execute(ACCOUNT_ID, "Designing Data-Intensive Applications", type="book", status="in_progress", tags="databases, distributed")
lib_uc.execute(ACCOUNT_ID, "FastAPI course", type="course", status="completed", tags="python, web")
lib_uc.execute(ACCOUNT_ID, "Habit stacking", type="article", tags="habits")

contact_uc = CreateContactUseCase(db)
contact_uc.execute(ACCOUNT_ID, "Anna Lopez", company="Fintech Co", industry="Finance", next_contact=today + timedelta(days=3))
contact_uc.execute(ACCOUNT_ID, "Marc Vidal", role="CTO", industry="Software", last_contact=today - timedelta(days=30))
print("  3 library items, 2 contacts created")

db.close()
print("Done.")
