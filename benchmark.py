from cssframe import Node
import timeit


if __name__ == "__main__":
    N = 100_000

    root = Node()
    card = (
        Node()
        .with_position(350, 250)
        .with_parent_perspective(500, 400, 300)
        .then_rotate_y(30)
        .then_rotate_x(45)
        .with_pivot(50, 50)
    )
    card.compose(root)  # warmup, compiles the kernels

    print("creation: ", timeit.timeit(lambda: Node(), number=N))
    print("rotate in place: ", timeit.timeit(lambda: card.copy().rotate_z(10), number=N))
    print("then_rotate: ", timeit.timeit(lambda: card.then_rotate_z(10), number=N))
    print("compose: ", timeit.timeit(lambda: card.compose(root), number=N))
    print("to_world: ", timeit.timeit(lambda: card.to_world(25, 75), number=N))

    x, y, z = card.to_world_3d(25, 75)
    print("to_local: ", timeit.timeit(lambda: card.to_local(x, y, z), number=N))
    print("ray_cast_to_local: ", timeit.timeit(lambda: card.ray_cast_to_local(x, y), number=N))
