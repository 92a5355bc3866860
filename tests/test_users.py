import asyncio

import pytest

from skillswap.errors import EmailTaken, NotFound, UnknownSkill
from skillswap.models.skill import Skill
from skillswap.schemas.skill import SkillOut
from skillswap.services.catalog import DEFAULT_SKILLS
from skillswap.services.locks import KeyedLocks


def test_catalog_is_seeded_once(harness):
    async def main():
        async with harness.running() as h:
            async with h.services() as s:
                skills = await s.catalog.list_skills()
                assert [x.name for x in skills] == [name for name, _ in DEFAULT_SKILLS]
                assert await s.catalog.seed_defaults() == 0
                assert (await s.catalog.get_skill_by_id(skills[0].id)).name == "JavaScript"
                with pytest.raises(NotFound):
                    await s.catalog.get_skill_by_id(999)

    asyncio.run(main())


def test_register_and_profile(harness):
    async def main():
        async with harness.running() as h:
            async with h.services() as s:
                user = await s.users.register("Sarah Johnson", "Sarah@Example.com", "Boston")
                assert user.email == "sarah@example.com"
                assert user.is_public is True
                with pytest.raises(EmailTaken):
                    await s.users.register("Other Sarah", "SARAH@example.com")

                updated = await s.users.update_profile(
                    user.id, location="Cambridge", is_public=False, email="ignored@example.com"
                )
                assert updated.location == "Cambridge"
                assert updated.is_public is False
                assert updated.email == "sarah@example.com"

                await s.users.soft_delete(user.id)
                with pytest.raises(NotFound):
                    await s.users.get_user(user.id)

    asyncio.run(main())


def test_skill_sets(harness):
    async def main():
        async with harness.running() as h:
            sarah = await h.make_user("Sarah Johnson")
            async with h.services() as s:
                await s.users.add_offered(sarah, h.skill("Python"))
                await s.users.add_offered(sarah, h.skill("Python"))
                await s.users.add_wanted(sarah, h.skill("Chess"))
                with pytest.raises(UnknownSkill):
                    await s.users.add_offered(sarah, 999)

            async with h.services() as s:
                user = await s.users.get_user(sarah)
                assert [x.name for x in user.skills_offered] == ["Python"]
                assert [x.name for x in user.skills_wanted] == ["Chess"]

                user = await s.users.remove_wanted(sarah, h.skill("Chess"))
                assert user.skills_wanted == []

    asyncio.run(main())


def test_skill_schema_uses_camel_case_and_nulls():
    skill = Skill(id=3, name="Origami", description=None)
    assert SkillOut.model_validate(skill).model_dump(by_alias=True) == {
        "skillId": 3,
        "name": "Origami",
        "description": None,
    }


def test_keyed_locks_forget_released_keys():
    locks = KeyedLocks()
    order = []

    async def worker(name):
        async with locks.hold("swap-1"):
            order.append(f"{name}-in")
            await asyncio.sleep(0)
            order.append(f"{name}-out")

    async def main():
        await asyncio.gather(worker("a"), worker("b"))
        assert len(locks) == 0

    asyncio.run(main())
    assert order == ["a-in", "a-out", "b-in", "b-out"]


def test_concurrent_registration_with_one_email(harness):
    async def main():
        async with harness.running() as h:

            async def register(name):
                async with h.services() as s:
                    return await s.users.register(name, "sam@example.com")

            results = await asyncio.gather(
                register("Sam One"), register("Sam Two"), return_exceptions=True
            )
            assert sorted(type(r).__name__ for r in results) == ["EmailTaken", "User"]

    asyncio.run(main())


def test_location_and_photo_can_be_cleared(harness):
    async def main():
        async with harness.running() as h:
            sarah = await h.make_user("Sarah Johnson", location="Boston")
            async with h.services() as s:
                await s.users.update_profile(sarah, photo_url="https://img.example/sarah.png")
                user = await s.users.update_profile(
                    sarah, location=None, photo_url=None, name=None, is_public=None
                )
                assert user.location is None
                assert user.photo_url is None
                assert user.name == "Sarah Johnson"
                assert user.is_public is True

    asyncio.run(main())
