import guildkit


def test_collection():
    collection: guildkit.Collection[str, int] = guildkit.Collection()
    assert collection.first() is None
    assert not collection

    collection.set('a', 1)
    collection.set('b', 2)
    collection.set('c', 3)

    assert collection.set('a', 10) == 10
    assert list(collection) == ['a', 'b', 'c']
    assert collection.to_list() == [10, 2, 3]
    assert collection['a'] == 10
    assert collection.get('z') is None
    assert collection.get('z', 0) == 0
    assert 'b' in collection
    assert len(collection) == 3
    assert collection.first() == 10

    values = collection.values()
    assert list(values) == [10, 2, 3]
    assert list(values) == [10, 2, 3]
    collection.set('d', 4)
    assert list(values) == [10, 2, 3, 4]


def test_collection_queries():
    collection = guildkit.Collection([('a', 5), ('b', 1), ('c', 3)])

    assert collection.find(lambda v: v < 4) == 1
    assert collection.find(lambda v: v > 100) is None
    assert collection.filter(lambda v: v > 2) == guildkit.Collection([('a', 5), ('c', 3)])
    assert collection.sorted(lambda v: v) == [1, 3, 5]
    assert collection.sorted(lambda v: v, reverse=True) == [5, 3, 1]

    snapshot = collection.to_list()
    snapshot.append(100)
    assert len(collection) == 3

    assert collection.prune(lambda v: v < 4) == 2
    assert collection.to_list() == [5]
    assert collection.delete('a') == 5
    assert collection.delete('a') is None

    collection.set('x', 1)
    collection.clear()
    assert len(collection) == 0
