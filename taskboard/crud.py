"""In-memory storage layer for users, categories and tasks."""

import logging
import threading
from datetime import datetime, timedelta
from typing import Optional
from .models import Task, TaskPriority, Category, User, DEFAULT_ICON

logger = logging.getLogger(__name__)

DEMO_USER_ID = 1

# Fields the store owns; updates never overwrite them
_TASK_IMMUTABLE = {"id", "user_id", "created_at"}
_CATEGORY_IMMUTABLE = {"id", "user_id"}


class MemStorage:
    """Holds every record in process memory, scoped by user id.

    Each collection has its own lock; id assignment and map insertion happen
    under that one lock so ids stay unique under concurrent access.

    Attributes:
        users: Users by id
        categories: Categories by id
        tasks: Tasks by id
    """

    def __init__(self, seed: bool = True):
        """Initialize empty collections and, optionally, the demo data.

        Args:
            seed: Create the demo user, default categories and sample tasks
        """
        self.users: dict[int, User] = {}
        self.categories: dict[int, Category] = {}
        self.tasks: dict[int, Task] = {}
        self._next_user_id = 1
        self._next_category_id = 1
        self._next_task_id = 1
        self._users_lock = threading.Lock()
        self._categories_lock = threading.Lock()
        self._tasks_lock = threading.Lock()
        if seed:
            self._seed()
        logger.info(
            "Storage ready: %d users, %d categories, %d tasks",
            len(self.users), len(self.categories), len(self.tasks)
        )

    def _seed(self) -> None:
        """Create the demo user with default categories and sample tasks."""
        user = self.create_user("demo", "password")
        work = self.create_category(user.id, "Work", "briefcase")
        self.create_category(user.id, "Personal", "home")
        self.create_category(user.id, "Learning", "book")

        now = datetime.now()
        today = now.replace(second=0, microsecond=0)
        tomorrow = today + timedelta(days=1)
        next_week = today + timedelta(days=7)

        samples = [
            ("Finalize project proposal",
             "Review all project requirements and submit final proposal to the client",
             today.replace(hour=16, minute=0), False, TaskPriority.HIGH, True),
            ("Schedule team meeting",
             "Coordinate with the team for sprint planning session",
             today.replace(hour=14, minute=30), False, TaskPriority.MEDIUM, False),
            ("Review code pull requests",
             "Review and provide feedback on open pull requests from the team",
             tomorrow.replace(hour=10, minute=0), False, TaskPriority.LOW, False),
            ("Send weekly report",
             "Compile and email weekly status report to stakeholders",
             today, True, TaskPriority.MEDIUM, False),
            ("Team retrospective",
             "Conduct team retrospective for the completed sprint",
             tomorrow.replace(hour=14, minute=0), False, TaskPriority.MEDIUM, False),
            ("Sprint planning",
             "Plan tasks for the next sprint",
             next_week.replace(hour=9, minute=30), False, TaskPriority.HIGH, True),
            ("Client presentation",
             "Present project progress to client",
             next_week.replace(hour=15, minute=0), False, TaskPriority.HIGH, True),
        ]
        for title, description, due, completed, priority, reminder in samples:
            self.create_task(
                user.id,
                title=title,
                description=description,
                due_date=due,
                completed=completed,
                priority=priority,
                category_id=work.id,
                reminder=reminder,
            )

    # --- Users ---

    def create_user(self, username: str, password: str) -> User:
        with self._users_lock:
            user = User(id=self._next_user_id, username=username, password=password)
            self._next_user_id += 1
            self.users[user.id] = user
        return user

    def get_user(self, user_id: int) -> Optional[User]:
        return self.users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        for user in self.users.values():
            if user.username == username:
                return user
        return None

    def user_ids(self) -> list[int]:
        with self._users_lock:
            return list(self.users)

    # --- Categories ---

    def list_categories(self, user_id: int) -> list[Category]:
        """Get all categories owned by a user."""
        with self._categories_lock:
            categories = list(self.categories.values())
        return [c for c in categories if c.user_id == user_id]

    def get_category(self, category_id: int, user_id: int) -> Optional[Category]:
        category = self.categories.get(category_id)
        if category is None or category.user_id != user_id:
            return None
        return category

    def create_category(self, user_id: int, name: str, icon: Optional[str] = None) -> Category:
        """Add a new category.

        Args:
            user_id: Owner of the category
            name: Display name
            icon: Symbolic icon identifier (default: list-check)

        Returns:
            The newly created Category

        Raises:
            pydantic.ValidationError: If the name is empty
        """
        with self._categories_lock:
            category = Category(
                id=self._next_category_id,
                user_id=user_id,
                name=name,
                icon=icon or DEFAULT_ICON,
            )
            self._next_category_id += 1
            self.categories[category.id] = category
        logger.info("Created category %s for user %s", category.id, user_id)
        return category

    def update_category(self, category_id: int, user_id: int, /, **updates) -> Optional[Category]:
        """Update a category's fields.

        Returns:
            Updated Category if found, None otherwise
        """
        with self._categories_lock:
            category = self.get_category(category_id, user_id)
            if category is None:
                return None
            category_dict = category.model_dump()
            category_dict.update({k: v for k, v in updates.items() if k not in _CATEGORY_IMMUTABLE})
            if category_dict.get("icon") is None:
                category_dict["icon"] = DEFAULT_ICON
            updated = Category(**category_dict)
            self.categories[category_id] = updated
        return updated

    def delete_category(self, category_id: int, user_id: int) -> bool:
        """Delete a category. Tasks keep their (now dangling) category_id.

        Returns:
            True if the category was deleted, False if not found
        """
        with self._categories_lock:
            if self.get_category(category_id, user_id) is None:
                return False
            del self.categories[category_id]
        logger.info("Deleted category %s for user %s", category_id, user_id)
        return True

    # --- Tasks ---

    def list_tasks(self, user_id: int) -> list[Task]:
        """Get all tasks owned by a user, in creation order."""
        with self._tasks_lock:
            tasks = list(self.tasks.values())
        return [t for t in tasks if t.user_id == user_id]

    def get_task(self, task_id: int, user_id: int) -> Optional[Task]:
        """Get a specific task by ID.

        Args:
            task_id: The task ID to find
            user_id: Owner the task must belong to

        Returns:
            Task object if found, None otherwise
        """
        task = self.tasks.get(task_id)
        if task is None or task.user_id != user_id:
            return None
        return task

    def create_task(
        self,
        user_id: int,
        title: str,
        description: Optional[str] = None,
        due_date: Optional[datetime] = None,
        completed: bool = False,
        priority: Optional[TaskPriority] = None,
        category_id: Optional[int] = None,
        reminder: bool = False,
    ) -> Task:
        """Add a new task.

        Args:
            user_id: Owner of the task
            title: Task title
            description: Optional task description
            due_date: Optional due date
            completed: Initial completion state
            priority: Priority level (default: medium)
            category_id: Optional category
            reminder: Whether due-soon notifications are wanted

        Returns:
            The newly created Task object

        Raises:
            pydantic.ValidationError: If a field is invalid
        """
        with self._tasks_lock:
            task = Task(
                id=self._next_task_id,
                user_id=user_id,
                title=title,
                description=description,
                due_date=due_date,
                completed=completed,
                priority=priority or TaskPriority.MEDIUM,
                category_id=category_id,
                reminder=reminder,
            )
            self._next_task_id += 1
            self.tasks[task.id] = task
        logger.info("Created task %s for user %s", task.id, user_id)
        return task

    def update_task(self, task_id: int, user_id: int, /, **updates) -> Optional[Task]:
        """Update a task's fields.

        The replacement record is validated before it is stored, so a failed
        update leaves the previous task untouched.

        Args:
            task_id: The task ID to update
            user_id: Owner the task must belong to
            **updates: Field names and new values

        Returns:
            Updated Task object if found, None otherwise
        """
        with self._tasks_lock:
            task = self.get_task(task_id, user_id)
            if task is None:
                return None
            task_dict = task.model_dump()
            task_dict.update({k: v for k, v in updates.items() if k not in _TASK_IMMUTABLE})
            if task_dict.get("priority") is None:
                task_dict["priority"] = TaskPriority.MEDIUM
            updated = Task(**task_dict)
            self.tasks[task_id] = updated
        return updated

    def toggle_complete(self, task_id: int, user_id: int) -> Optional[Task]:
        """Toggle a task's completion status.

        Returns:
            Updated Task object if found, None otherwise
        """
        with self._tasks_lock:
            task = self.get_task(task_id, user_id)
            if task is None:
                return None
            updated = Task(**{**task.model_dump(), "completed": not task.completed})
            self.tasks[task_id] = updated
        return updated

    def delete_task(self, task_id: int, user_id: int) -> bool:
        """Delete a task by ID.

        Returns:
            True if task was deleted, False if not found
        """
        with self._tasks_lock:
            if self.get_task(task_id, user_id) is None:
                return False
            del self.tasks[task_id]
        logger.info("Deleted task %s for user %s", task_id, user_id)
        return True

    def search_tasks(self, user_id: int, keyword: str) -> list[Task]:
        """Search a user's tasks by keyword in title or description.

        Args:
            user_id: Owner of the tasks
            keyword: Search keyword (case-insensitive)

        Returns:
            List of tasks matching the keyword
        """
        keyword_lower = keyword.lower()
        return [
            task for task in self.list_tasks(user_id)
            if keyword_lower in task.title.lower()
            or keyword_lower in (task.description or "").lower()
        ]
