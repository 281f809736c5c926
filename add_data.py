"""
Script to add sample courses and marks to MarkTrack via the REST API.
Make sure the server is running before executing this script.

Usage:
    python add_data.py
"""

import requests
import json
import sys
import os


def _console_supports_utf8() -> bool:
    enc = getattr(sys.stdout, "encoding", None)
    return enc is not None and "utf" in enc.lower()


_OK_CHAR = "✓" if _console_supports_utf8() else "[OK]"
_FAIL_CHAR = "✗" if _console_supports_utf8() else "[FAIL]"


def _detect_base_url() -> str:
    """Determine a reachable BASE_URL.

    Priority: environment variable `MARKTRACK_BASE_URL`, then common local ports.
    If nothing responds, fall back to http://127.0.0.1:7878.
    """
    env = os.environ.get("MARKTRACK_BASE_URL")
    if env:
        return env

    candidates = [
        "http://127.0.0.1:7878",
        "http://127.0.0.1:8000",
        "http://localhost:7878",
        "http://localhost:8000",
    ]

    for c in candidates:
        try:
            resp = requests.get(f"{c}/health", timeout=0.5)
            if resp.status_code == 200:
                return c
        except requests.exceptions.RequestException:
            continue

    return candidates[0]


BASE_URL = _detect_base_url()


def check_server():
    """Check if the server is running."""
    try:
        response = requests.get(f"{BASE_URL}/health", timeout=2)
        if response.status_code == 200:
            print(f"{_OK_CHAR} Server is running")
            return True
    except requests.exceptions.RequestException:
        pass
    print(f"{_FAIL_CHAR} Server is not running!")
    print("\nPlease start the server first:")
    print("  python -m marktrack.main --port 7878")
    return False


def create_course(code, name):
    """Create a new course."""
    url = f"{BASE_URL}/courses"
    try:
        response = requests.post(url, json={"code": code, "name": name})
        if response.status_code == 201:
            print(f"{_OK_CHAR} Created course: {code} - {name}")
            return response.json()
        print(f"{_FAIL_CHAR} Failed to create course: {response.text}")
        return None
    except requests.exceptions.RequestException as e:
        print(f"{_FAIL_CHAR} Error creating course: {e}")
        return None


def create_mark(course_id, name, score, max_score, weightage):
    """Add a mark to a course."""
    url = f"{BASE_URL}/courses/{course_id}/marks"
    data = {
        "name": name,
        "score": score,
        "max_score": max_score,
        "weightage": weightage
    }
    try:
        response = requests.post(url, json=data)
        if response.status_code == 201:
            mark = response.json()
            print(f"{_OK_CHAR}   {name}: {score}/{max_score} at weightage {weightage} -> {mark['weighted']:.2f}")
            return mark
        print(f"{_FAIL_CHAR} Failed to add mark: {response.text}")
        return None
    except requests.exceptions.RequestException as e:
        print(f"{_FAIL_CHAR} Error adding mark: {e}")
        return None


def update_mark(course_id, mark_id, **fields):
    """Revise a mark; only the given fields change."""
    url = f"{BASE_URL}/courses/{course_id}/marks/{mark_id}"
    try:
        response = requests.put(url, json=fields)
        if response.status_code == 200:
            print(f"{_OK_CHAR} Updated mark {mark_id}: {fields}")
            return response.json()
        print(f"{_FAIL_CHAR} Failed to update mark: {response.text}")
        return None
    except requests.exceptions.RequestException as e:
        print(f"{_FAIL_CHAR} Error updating mark: {e}")
        return None


def list_courses():
    """List all courses with their totals."""
    url = f"{BASE_URL}/courses"
    try:
        response = requests.get(url)
        if response.status_code == 200:
            courses = response.json()
            print(f"\n{'='*60}")
            print(f"Courses ({len(courses)})")
            print(f"{'='*60}")
            for course in courses:
                print(f"  {course['code']:8} | {course['name']:25} | {len(course['marks'])} marks | "
                      f"weightage {course['total_weightage']:.2f} | weighted {course['total_weighted']:.2f}")
            return courses
        print(f"{_FAIL_CHAR} Failed to list courses: {response.text}")
        return []
    except requests.exceptions.RequestException as e:
        print(f"{_FAIL_CHAR} Error listing courses: {e}")
        return []


def get_statistics():
    """Get catalog statistics."""
    url = f"{BASE_URL}/statistics"
    try:
        response = requests.get(url)
        if response.status_code == 200:
            stats = response.json()
            print(f"\n{'='*60}")
            print("Catalog Statistics")
            print(f"{'='*60}")
            print(json.dumps(stats['statistics'], indent=2))
            return stats
        print(f"{_FAIL_CHAR} Failed to get statistics: {response.text}")
        return None
    except requests.exceptions.RequestException as e:
        print(f"{_FAIL_CHAR} Error getting statistics: {e}")
        return None


def main():
    """Main execution."""
    print("="*60)
    print("MarkTrack - Data Addition Script")
    print("="*60)
    print()

    if not check_server():
        sys.exit(1)

    print("\nCreating courses...")
    programming = create_course("CS 101", "Introduction to Programming")
    calculus = create_course("MA 101", "Calculus I")

    print("\nAdding marks...")
    quiz = None
    if programming:
        quiz = create_mark(programming['id'], "Quiz 1", 80, 100, 20)
        create_mark(programming['id'], "Assignment 1", 45, 50, 10)
        create_mark(programming['id'], "Midterm", 30, 50, 30)
    if calculus:
        create_mark(calculus['id'], "Problem Set", 18, 20, 15)
        create_mark(calculus['id'], "Final", 70, 100, 50)

    print("\nRevising marks...")
    if programming and quiz:
        update_mark(programming['id'], quiz['id'], weightage="30")
        update_mark(programming['id'], quiz['id'], max_score="160")

    print("\nSeeding random courses...")
    requests.post(f"{BASE_URL}/courses/seed", params={"count": 2})

    list_courses()
    get_statistics()

    print("\n" + "="*60)
    print(f"{_OK_CHAR} Sample data added successfully!")
    print("="*60)
    print("\nYou can now:")
    print(f"  - View API docs: {BASE_URL}/docs")
    print(f"  - List courses: curl {BASE_URL}/courses")
    print(f"  - Get statistics: curl {BASE_URL}/statistics")
    print()


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print(f"\n\n{_FAIL_CHAR} Interrupted by user")
        sys.exit(1)
