from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date

from ..classes.model import ClassSchedule, Session
from ..classes.repository import ClassRepository
from ..common.validators import require_date
from ..core.constants import DEFAULT_PAGE_FETCH_WORKERS
from ..core.enums import PersonType, TimePeriod
from ..enrollments.service import EnrollmentRegistry
from ..people.model import Person
from ..people.repository import PersonRepository
from ..schedules.service import ScheduleService
from .service import AttendanceLedger


@dataclass(frozen=True)
class AttendancePageData:
    """Read-model cho trang điểm danh một lớp trong một ngày."""

    class_: ClassSchedule
    on_date: date
    sessions: list[Session]
    students: list[Person]
    teachers: list[Person]
    student_attendance: dict[TimePeriod, dict[int, bool]] = field(default_factory=dict)
    teacher_attendance: dict[TimePeriod, dict[int, bool]] = field(default_factory=dict)

    def as_dict(self) -> dict:
        def _people(items: list[Person]) -> list[dict]:
            return [{"id": p.person_id, "full_name": p.full_name, "phone": p.phone} for p in items]

        def _matrix(m: dict[TimePeriod, dict[int, bool]]) -> dict:
            return {period.value: {str(pid): v for pid, v in cells.items()} for period, cells in m.items()}

        return {
            "class": {"id": self.class_.class_id, "name": self.class_.name, "subject": self.class_.subject},
            "date": self.on_date.isoformat(),
            "sessions": [
                {
                    "period": s.period.value,
                    "label": s.period.label,
                    "start_time": s.start_time.strftime("%H:%M") if s.start_time else None,
                }
                for s in self.sessions
            ],
            "students": _people(self.students),
            "teachers": _people(self.teachers),
            "student_attendance": _matrix(self.student_attendance),
            "teacher_attendance": _matrix(self.teacher_attendance),
        }


class AttendancePageAssembler:
    """Gathers everything one attendance page needs with concurrent reads.

    Each read is independently consistent; results are joined in memory by id.
    Any store failure surfaces from `Future.result()` unchanged.
    """

    def __init__(
        self,
        *,
        schedules: ScheduleService,
        classes: ClassRepository,
        enrollments: EnrollmentRegistry,
        people: PersonRepository,
        ledger: AttendanceLedger,
        max_workers: int = DEFAULT_PAGE_FETCH_WORKERS,
    ):
        self._schedules = schedules
        self._classes = classes
        self._enrollments = enrollments
        self._people = people
        self._ledger = ledger
        self._max_workers = max(1, int(max_workers))

    def assemble(self, class_id: int, on_date: date) -> AttendancePageData:
        on_date = require_date(on_date)
        class_id = int(class_id)

        with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
            f_class = pool.submit(self._schedules.get_class, class_id)
            f_student_ids = pool.submit(
                self._enrollments.eligible_people, class_id, on_date, person_type=PersonType.STUDENT
            )
            f_teacher_ids = pool.submit(self._classes.list_teacher_ids, class_id)
            f_student_att = pool.submit(
                self._ledger.list_by_class_date, class_id, on_date, person_type=PersonType.STUDENT
            )
            f_teacher_att = pool.submit(
                self._ledger.list_by_class_date, class_id, on_date, person_type=PersonType.TEACHER
            )

            schedule = f_class.result()
            f_students = pool.submit(self._people.list_by_ids, PersonType.STUDENT, f_student_ids.result())
            f_teachers = pool.submit(self._people.list_by_ids, PersonType.TEACHER, f_teacher_ids.result())

            return AttendancePageData(
                class_=schedule,
                on_date=on_date,
                sessions=self._schedules.resolver.sessions_on(schedule, on_date),
                students=list(f_students.result()),
                teachers=list(f_teachers.result()),
                student_attendance=f_student_att.result(),
                teacher_attendance=f_teacher_att.result(),
            )
