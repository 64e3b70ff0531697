from shared.migrations.runner import VERSIONS_DIR, MigrationRunner


def test_bundled_schema_creates_timer_tables():
    sql = (VERSIONS_DIR / "000_timer_state.sql").read_text(encoding="utf-8")

    assert "CREATE TABLE IF NOT EXISTS timer_preferences" in sql
    assert "CREATE TABLE IF NOT EXISTS timer_snapshots" in sql


async def test_pending_skips_applied(fake_pool, tmp_path):
    (tmp_path / "001_second.sql").write_text("SELECT 2;", encoding="utf-8")
    (tmp_path / "000_first.sql").write_text("SELECT 1;", encoding="utf-8")
    fake_pool.conn.rows = [{"version": "000_first"}]
    runner = MigrationRunner(fake_pool, tmp_path)

    pending = await runner.pending()

    assert [p.stem for p in pending] == ["001_second"]


async def test_run_pending_applies_in_order(fake_pool, tmp_path):
    (tmp_path / "001_second.sql").write_text("SELECT 2;", encoding="utf-8")
    (tmp_path / "000_first.sql").write_text("SELECT 1;", encoding="utf-8")
    runner = MigrationRunner(fake_pool, tmp_path)

    applied = await runner.run_pending()

    assert applied == ["000_first", "001_second"]
    queries = [q for q, _ in fake_pool.conn.executed]
    assert queries.index("SELECT 1;") < queries.index("SELECT 2;")
    inserts = [args for q, args in fake_pool.conn.executed if q.startswith("INSERT")]
    assert inserts == [("000_first", "000_first.sql"), ("001_second", "001_second.sql")]


async def test_run_pending_when_up_to_date(fake_pool, tmp_path):
    (tmp_path / "000_first.sql").write_text("SELECT 1;", encoding="utf-8")
    fake_pool.conn.rows = [{"version": "000_first"}]

    assert await MigrationRunner(fake_pool, tmp_path).run_pending() == []
