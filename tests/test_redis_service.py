async def test_rate_limit_allows_up_to_limit(redis, fake_redis):
    results = [await redis.check_rate_limit("rate_limit:user:u:/submit", limit=3, window=60) for _ in range(4)]

    assert results == [True, True, True, False]
    assert fake_redis.expirations["rate_limit:user:u:/submit"] == 60


async def test_delete_by_prefix(redis, fake_redis):
    await redis.set("moderation:a", "1", expire=10)
    await redis.set("moderation:b", "2", expire=10)
    await redis.set("rate_limit:x", "3", expire=10)

    assert await redis.delete_by_prefix("moderation:") == 2
    assert list(fake_redis.store) == ["rate_limit:x"]


async def test_delete_without_keys(redis):
    assert await redis.delete() == 0
