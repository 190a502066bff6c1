import sqlite3, os, json
from typing import List

from app.errors import DatabaseError
from app.state import LeaderboardEntry

DB_PATH = "data/results.db"

_RESULT_COLUMNS = (
    "id", "timestamp", "topic", "admission_number", "student_name", "class_name",
    "wpm", "accuracy", "errors", "total_chars", "time_elapsed_seconds", "current_marks",
)


def _ensure_schema(conn):
    conn.execute("""
    CREATE TABLE IF NOT EXISTS students(
        admission_number TEXT PRIMARY KEY,
        student_name TEXT NOT NULL,
        class_name TEXT NOT NULL,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP
    );
    """)
    conn.execute("""
    CREATE TABLE IF NOT EXISTS results(
        id TEXT PRIMARY KEY,
        timestamp REAL NOT NULL,
        topic TEXT NOT NULL,
        admission_number TEXT NOT NULL,
        student_name TEXT NOT NULL,
        class_name TEXT NOT NULL,
        wpm INTEGER,
        accuracy INTEGER,
        errors INTEGER,
        total_chars INTEGER,
        time_elapsed_seconds REAL,
        current_marks INTEGER,
        weak_keys_json TEXT,
        FOREIGN KEY(admission_number) REFERENCES students(admission_number)
    );
    """)


def get_conn(db_path: str = DB_PATH):
    parent = os.path.dirname(db_path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    conn = sqlite3.connect(db_path)
    _ensure_schema(conn)
    return conn


def _open(db_path: str):
    try:
        return get_conn(db_path)
    except (sqlite3.Error, OSError) as e:
        raise DatabaseError(str(e)) from e


def upsert_student(admission_number: str, student_name: str, class_name: str, db_path: str = DB_PATH) -> None:
    conn = _open(db_path)
    try:
        conn.execute(
            "INSERT INTO students(admission_number, student_name, class_name) VALUES (?,?,?) "
            "ON CONFLICT(admission_number) DO UPDATE SET student_name=excluded.student_name, "
            "class_name=excluded.class_name",
            (admission_number, student_name, class_name),
        )
        conn.commit()
    except sqlite3.Error as e:
        raise DatabaseError(str(e)) from e
    finally:
        conn.close()


def insert_result(entry: LeaderboardEntry, db_path: str = DB_PATH) -> None:
    upsert_student(entry.admission_number, entry.student_name, entry.class_name, db_path)
    conn = _open(db_path)
    try:
        row = entry.to_dict()
        conn.execute(
            f"INSERT INTO results({', '.join(_RESULT_COLUMNS)}, weak_keys_json) "
            f"VALUES ({', '.join('?' * (len(_RESULT_COLUMNS) + 1))})",
            tuple(row[c] for c in _RESULT_COLUMNS) + (json.dumps(entry.weak_keys),),
        )
        conn.commit()
    except sqlite3.Error as e:
        raise DatabaseError(str(e)) from e
    finally:
        conn.close()


def leaderboard(class_name: str, db_path: str = DB_PATH) -> List[LeaderboardEntry]:
    """Results for one class, best marks first."""
    conn = _open(db_path)
    try:
        cur = conn.execute(
            f"SELECT {', '.join(_RESULT_COLUMNS)}, weak_keys_json FROM results WHERE class_name=? "
            "ORDER BY current_marks DESC, timestamp ASC",
            (class_name,),
        )
        return [
            LeaderboardEntry(**dict(zip(_RESULT_COLUMNS, r)), weak_keys=json.loads(r[-1] or "{}"))
            for r in cur.fetchall()
        ]
    except sqlite3.Error as e:
        raise DatabaseError(str(e)) from e
    finally:
        conn.close()


def delete_result(result_id: str, db_path: str = DB_PATH) -> bool:
    conn = _open(db_path)
    try:
        cur = conn.execute("DELETE FROM results WHERE id=?", (result_id,))
        conn.commit()
        return cur.rowcount > 0
    except sqlite3.Error as e:
        raise DatabaseError(str(e)) from e
    finally:
        conn.close()


def clear_results(db_path: str = DB_PATH) -> None:
    conn = _open(db_path)
    try:
        conn.execute("DELETE FROM results")
        conn.commit()
    except sqlite3.Error as e:
        raise DatabaseError(str(e)) from e
    finally:
        conn.close()
