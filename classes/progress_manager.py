from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models import db
from models.course_modules import CourseModule
from models.course_sections import CourseSection
from models.course_progress import UserCourseProgress
from models.section_progress import SectionProgress, UNIQUE_SECTION_CONSTRAINT
from classes.errors import ProgressError, NotFound, NotEnrolled, AlreadyCompleted, EmptySection
from utils.helpers import format_date
from utils.score_service import reward_points, add_score


class ProgressManager:
    """Section/module/course completion bookkeeping for enrolled users.

    ``mark_section_done`` and ``mark_section_undone`` are the only writers of
    ``UserCourseProgress`` counters. Each call runs in a single transaction:
    it either commits every change or rolls all of them back.
    """

    @staticmethod
    def _resolve_section(section_id):
        section = db.session.get(CourseSection, section_id)
        if not section:
            raise NotFound("Section not found.", section_id=section_id)
        module = section.module
        if not module:
            raise NotFound("Module not found.", section_id=section_id)
        return section, module

    @staticmethod
    def _module_is_complete(module_id, completed_ids):
        module_section_ids = CourseSection.ids_for_module(module_id)
        return bool(module_section_ids) and all(sid in completed_ids for sid in module_section_ids)

    @staticmethod
    def _is_duplicate_completion(error, user_id, section_id):
        """True when ``error`` comes from the unique (user, section) completion row.

        MySQL and PostgreSQL report the constraint name, SQLite reports the
        column list. A row committed by a concurrent request also counts.
        """
        message = str(getattr(error, "orig", error))
        if UNIQUE_SECTION_CONSTRAINT in message or "user_course_section_progress.course_section_id" in message:
            return True
        return SectionProgress.find(user_id, section_id) is not None

    @staticmethod
    def mark_section_done(user_id, section_id):
        section, module = ProgressManager._resolve_section(section_id)
        course_id = module.course_id
        result = {
            "section_id": section.id,
            "module_completed": False,
            "course_completed": False,
            "points_awarded": 0,
        }

        try:
            progress = UserCourseProgress.for_user(user_id, course_id, lock=True)
            if not progress:
                raise NotEnrolled(user_id=user_id, course_id=course_id)

            if SectionProgress.find(user_id, section.id):
                raise AlreadyCompleted(user_id=user_id, section_id=section.id)

            if section.material_count() == 0:
                raise EmptySection(section_id=section.id)

            db.session.add(SectionProgress(user_id=user_id, course_section_id=section.id))
            db.session.flush()

            if section.id not in progress.completed_section_ids:
                progress.completed_section_ids.append(section.id)
                progress.completed_sections += 1
                progress.pending_sections = max(0, progress.pending_sections - 1)

            completed_ids = set(progress.completed_section_ids)
            if (ProgressManager._module_is_complete(module.id, completed_ids)
                    and module.id not in progress.completed_module_ids):
                progress.completed_module_ids.append(module.id)
                progress.completed_modules += 1
                progress.pending_modules = max(0, progress.pending_modules - 1)
                result["module_completed"] = True

            if progress.pending_sections == 0 and progress.pending_modules == 0 and not progress.awarded:
                progress.awarded = True
                points = reward_points(len(CourseModule.ids_for_course(course_id)))
                add_score(user_id, points)
                result["course_completed"] = True
                result["points_awarded"] = points
                current_app.logger.info(
                    "User %s completed course %s and was awarded %s points", user_id, course_id, points
                )

            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            if not ProgressManager._is_duplicate_completion(e, user_id, section.id):
                current_app.logger.exception(
                    "Integrity error marking section %s done for user %s", section_id, user_id
                )
                raise
            current_app.logger.warning("Concurrent completion of section %s by user %s", section_id, user_id)
            raise AlreadyCompleted(user_id=user_id, section_id=section_id)
        except ProgressError as e:
            db.session.rollback()
            current_app.logger.warning("Mark section done rejected: %s %s", e.error_code, e.context)
            raise
        except SQLAlchemyError:
            db.session.rollback()
            current_app.logger.exception("Error marking section %s done for user %s", section_id, user_id)
            raise

        result["progress"] = progress.to_dict()
        return result

    @staticmethod
    def mark_section_undone(user_id, section_id):
        section, module = ProgressManager._resolve_section(section_id)
        course_id = module.course_id
        result = {"section_id": section.id, "module_reopened": False}

        try:
            progress = UserCourseProgress.for_user(user_id, course_id, lock=True)
            if not progress:
                raise NotEnrolled(user_id=user_id, course_id=course_id)

            existing = SectionProgress.find(user_id, section.id)
            if existing:
                db.session.delete(existing)

            if section.id in progress.completed_section_ids:
                progress.completed_section_ids.remove(section.id)
                progress.completed_sections = max(0, progress.completed_sections - 1)
                progress.pending_sections += 1

            if module.id in progress.completed_module_ids:
                completed_ids = set(progress.completed_section_ids)
                if not ProgressManager._module_is_complete(module.id, completed_ids):
                    progress.completed_module_ids.remove(module.id)
                    progress.completed_modules = max(0, progress.completed_modules - 1)
                    progress.pending_modules += 1
                    result["module_reopened"] = True

            # awarded points are never revoked
            db.session.commit()
        except ProgressError as e:
            db.session.rollback()
            current_app.logger.warning("Mark section undone rejected: %s %s", e.error_code, e.context)
            raise
        except SQLAlchemyError:
            db.session.rollback()
            current_app.logger.exception("Error marking section %s undone for user %s", section_id, user_id)
            raise

        result["progress"] = progress.to_dict()
        return result

    @staticmethod
    def check_consistency(progress):
        """Returns a list of problems found in the denormalized counters."""
        problems = []
        section_ids = list(progress.completed_section_ids or [])
        module_ids = list(progress.completed_module_ids or [])

        if len(section_ids) != len(set(section_ids)):
            problems.append("completed_section_ids contains duplicates")
        if len(module_ids) != len(set(module_ids)):
            problems.append("completed_module_ids contains duplicates")
        if progress.completed_sections != len(set(section_ids)):
            problems.append(
                f"completed_sections={progress.completed_sections} but {len(set(section_ids))} section ids recorded"
            )
        if progress.completed_modules != len(set(module_ids)):
            problems.append(
                f"completed_modules={progress.completed_modules} but {len(set(module_ids))} module ids recorded"
            )
        for field in ("completed_sections", "pending_sections", "completed_modules", "pending_modules"):
            if getattr(progress, field) < 0:
                problems.append(f"{field} is negative")

        recorded = {
            p.course_section_id
            for p in SectionProgress.query.filter_by(user_id=progress.user_id).all()
        }
        course_section_ids = {
            s.id for s in CourseSection.query
            .join(CourseModule, CourseModule.id == CourseSection.module_id)
            .filter(CourseModule.course_id == progress.course_id)
            .all()
        }
        if recorded & course_section_ids != set(section_ids) & course_section_ids:
            problems.append("completed_section_ids disagree with section progress rows")
        return problems

    @staticmethod
    def summarize(progress):
        total_items = progress.total_sections + progress.total_modules
        completed_items = progress.completed_sections + progress.completed_modules
        overall = (completed_items / total_items) * 100 if total_items > 0 else 0

        if overall == 100:
            status = "Completed"
        elif overall >= 60:
            status = "Close"
        elif overall >= 40:
            status = "Progressing"
        else:
            status = "Started"

        return {
            **progress.to_dict(),
            "completion_percentage": round(overall, 2),
            "completion_status": status,
            "started_date": format_date(progress.created_at),
        }
