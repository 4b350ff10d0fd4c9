"""Example usage of the memstore library."""

from dataclasses import asdict, dataclass

from memstore import PaginationOptions, ScopedStore, SortOption, SortOrder, StoreConfig


@dataclass
class Person:
    id: str
    name: str
    age: int
    city: str
    type: str = "person"


people = [
    Person("p-01", "Alice", 30, "Oslo"),
    Person("p-02", "Bob", 25, "Bergen"),
    Person("p-03", "Charlie", 35, "Oslo"),
    Person("p-04", "Diana", 28, "Trondheim"),
    Person("p-05", "Eve", 22, "Bergen"),
    Person("p-06", "Frank", 45, "Oslo"),
    Person("p-07", "Grace", 30, "Bergen"),
]

store = ScopedStore(
    to_json=asdict,
    get_id=lambda person: person.id,
    initial_data=people,
    config=StoreConfig(search_fields={"person": "name"}),
)

print("People aged 30 or more, oldest first:")
page = store.read_all(
    filter={"age": {"$gte": 30}},
    sort=[SortOption("age", SortOrder.DESC), SortOption("name")],
)
for person in page.items:
    print(f"  {person.name}, age {person.age}")

print("\nPaging through everyone, three at a time:")
cursor = None
while True:
    page = store.read_all(sort=["name"], pagination=PaginationOptions(cursor=cursor, limit=3))
    print("  " + ", ".join(person.name for person in page.items))
    if not page.has_more:
        break
    cursor = page.next_cursor

print("\nSearch for 'ar':", [p.name for p in store.read_all(filter={"q": "ar"}).items])

print("\nHeadcount per city:")
for row in store.aggregate([
    {"$group": {"_id": "$city", "count": {"$sum": 1}, "totalAge": {"$sum": "$age"}}},
    {"$sort": {"count": -1, "_id": 1}},
]):
    print(f"  {row['_id']}: {row['count']} people, total age {row['totalAge']}")

# Owner partitions are isolated from the global one
store.create(Person("p-01", "Alice (private copy)", 31, "Oslo"), owner="user-42")
print("\nGlobal count:", store.count())
print("user-42 count:", store.count(owner="user-42"))
