from __future__ import annotations

import guildkit

from factories import guild_payload, make_state, member_payload, role_payload, snowflake

GUILD_ID = snowflake(1)
OWNER_ID = snowflake(2)
ME_ID = snowflake(3)
TARGET_ID = snowflake(4)

MOD_ROLE = snowflake(10)
TARGET_ROLE = snowflake(11)


def setup_guild(*, my_position: int, target_position: int, my_permissions: int) -> tuple[guildkit.State, guildkit.Guild]:
    state, _ = make_state()
    state.me = state.parser.parse_client_user({'id': ME_ID, 'username': 'me', 'bot': True})

    guild = state.parser.parse_guild(
        guild_payload(
            GUILD_ID,
            OWNER_ID,
            roles=[
                role_payload(MOD_ROLE, position=my_position, permissions=my_permissions),
                role_payload(TARGET_ROLE, position=target_position),
            ],
        )
    )
    for data in (
        member_payload(ME_ID, roles=[MOD_ROLE]),
        member_payload(TARGET_ID, roles=[TARGET_ROLE]),
        member_payload(OWNER_ID, roles=[]),
    ):
        guild.members._store(state.parser.parse_member(data, GUILD_ID))
    return state, guild


KICK = guildkit.Permissions(kick_members=True).value
BAN = guildkit.Permissions(ban_members=True).value
ADMIN = guildkit.Permissions(administrator=True).value


def test_equal_position_is_kickable():
    _, guild = setup_guild(my_position=5, target_position=5, my_permissions=KICK)
    target = guild.get_member(TARGET_ID)
    assert target is not None

    assert target.kickable is True
    assert target.bannable is False
    assert target.banneable is False


def test_higher_target_is_not_kickable():
    _, guild = setup_guild(my_position=5, target_position=6, my_permissions=KICK | BAN)
    target = guild.get_member(TARGET_ID)
    assert target is not None

    assert target.kickable is False
    assert target.bannable is False


def test_self_and_owner_are_not_kickable():
    _, guild = setup_guild(my_position=5, target_position=1, my_permissions=ADMIN)
    me = guild.me
    owner = guild.get_member(OWNER_ID)
    target = guild.get_member(TARGET_ID)
    assert me is not None and owner is not None and target is not None

    assert me.kickable is False
    assert owner.kickable is False
    assert target.kickable is True
    assert target.bannable is True
    assert target.moderatable is True


def test_unknown_self_member():
    state, guild = setup_guild(my_position=5, target_position=1, my_permissions=KICK)
    guild.members.cache.delete(ME_ID)
    target = guild.get_member(TARGET_ID)
    assert target is not None

    assert target.kickable is False

    state.me = None
    assert target.kickable is False


def test_helpers():
    state, guild = setup_guild(my_position=7, target_position=2, my_permissions=KICK)
    roles = guild.roles.to_list()

    assert guildkit.highest_position([]) == 0
    assert guildkit.highest_position(roles) == 7
    assert guildkit.combined_permissions(roles).kick_members is True

    me = guild.me
    assert me is not None
    assert me.roles.highest is not None
    assert me.roles.highest.id == MOD_ROLE
    assert me.permissions.kick_members is True

    ordered = guildkit.sort_member_roles([TARGET_ROLE, MOD_ROLE, snowflake(99)], guild_roles=guild.roles)
    assert [role.id for role in ordered] == [MOD_ROLE, TARGET_ROLE]
