from src.attendance_tracker.attendance_tracker.database.bootstrap import SCHEMA_PATH, iter_sql_statements


def test_splitter_handles_quotes_and_comments():
    sql = "-- header; not a statement\nCREATE TABLE a (x VARCHAR(10) DEFAULT 'a;b');\nINSERT INTO a VALUES ('c');"

    statements = list(iter_sql_statements(sql))

    assert statements == ["CREATE TABLE a (x VARCHAR(10) DEFAULT 'a;b')", "INSERT INTO a VALUES ('c')"]


def test_schema_declares_one_open_session_per_user():
    sql = SCHEMA_PATH.read_text(encoding="utf-8")
    statements = list(iter_sql_statements(sql))

    attendance = next(s for s in statements if "attendance_records" in s and s.startswith("CREATE TABLE"))
    assert "UNIQUE KEY uq_attendance_checkin_id (checkin_id)" in attendance
    assert "UNIQUE KEY uq_attendance_active_user (active_user_id)" in attendance
