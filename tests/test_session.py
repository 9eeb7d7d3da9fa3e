"""AdminSession startup tests."""

import asyncio

from fretes.session import AdminSession

from conftest import FASTEX_ID


class TestAdminSession:
    def test_start_loads_reference_data_then_packages(self, backend, make_client):
        async def scenario():
            async with AdminSession(client=make_client()) as session:
                return await session.start()

        session = asyncio.run(scenario())
        paths = [r.url.path for r in backend.requests]
        assert paths[-1] == "/api/v1/packages"
        assert set(paths[:2]) == {"/api/v1/carriers", "/api/v1/states"}
        assert len(session.directory) == 3

    def test_start_survives_an_unreachable_api(self, backend, make_client):
        for path in ("/api/v1/carriers", "/api/v1/states", "/api/v1/packages"):
            backend.disconnect("GET", path)

        async def scenario():
            async with AdminSession(client=make_client()) as session:
                return await session.start()

        session = asyncio.run(scenario())
        assert session.reference.carriers == []
        assert len(session.directory) == 0
        assert session.hire_workflow().candidates == []

    def test_each_workflow_owns_its_selection(self, make_client):
        async def scenario():
            async with AdminSession(client=make_client()) as session:
                await session.start()
                first, second = session.hire_workflow(), session.hire_workflow()
                await first.select_package("p1")
                await first.select_carrier(FASTEX_ID)
                return first, second

        first, second = asyncio.run(scenario())
        assert first.can_submit
        assert second.selected_package_id is None
        assert second.resolved_quote is None
